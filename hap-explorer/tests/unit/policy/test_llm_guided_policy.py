from __future__ import annotations

import random
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest
from hap_fakes import HAP, FakeDevice, button, make_state, stop_state

from hap_explorer.event.event import Event
from hap_explorer.event.key_event import BACK_KEY_EVENT
from hap_explorer.event.system_event import AbilityEvent, ExitEvent
from hap_explorer.event.ui_event import TouchEvent
from hap_explorer.event.wait_event import WaitEvent
from hap_explorer.policy.llm_guided_policy import EventOracle, LlmGuidedPolicy
from hap_explorer.policy.prompt_builder import QUESTION_PROMPT
from hap_explorer.policy.utg_naive_search_policy import UtgNaiveSearchPolicy


class BlockingOracle:
    """Picks the first candidate once `release` is set."""

    def __init__(self) -> None:
        self.release = threading.Event()
        self.calls: List[Dict[str, Any]] = []

    def select_event(self, candidates: Sequence[Event], context: Dict[str, Any]) -> Optional[Event]:
        self.calls.append(context)
        self.release.wait(timeout=5)
        return candidates[0]


class ScriptedOracle:
    def __init__(self, answer: Callable[[Sequence[Event]], Optional[Event]]) -> None:
        self.answer = answer
        self.calls = 0

    def select_event(self, candidates: Sequence[Event], context: Dict[str, Any]) -> Optional[Event]:
        self.calls += 1
        return self.answer(candidates)


def _wait_until(predicate: Callable[[], bool], timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met in time")
        time.sleep(0.01)


def _page():
    return make_state(
        "pages/Index",
        button("ok", 0, 0, 100, 100, text="OK"),
        button("help", 0, 200, 100, 300, text="Help"),
    )


@pytest.fixture
def make_llm():
    created: List[LlmGuidedPolicy] = []

    def factory(oracle: Any, **kwargs: Any) -> LlmGuidedPolicy:
        base = UtgNaiveSearchPolicy(FakeDevice(), HAP, random_input=False)
        llm = LlmGuidedPolicy(base, oracle, rng=random.Random(0), **kwargs)
        created.append(llm)
        return llm

    yield factory
    for llm in created:
        llm.close()


def test_oracle_protocol() -> None:
    assert isinstance(BlockingOracle(), EventOracle)


def test_waits_while_oracle_call_is_in_flight(make_llm) -> None:
    oracle = BlockingOracle()
    llm = make_llm(oracle)

    assert isinstance(llm.generate_event(_page()), WaitEvent)
    _wait_until(lambda: len(oracle.calls) == 1)
    assert llm.fetching is True
    assert isinstance(llm.generate_event(_page()), WaitEvent)

    oracle.release.set()
    _wait_until(lambda: not llm.fetching)
    event = llm.generate_event(_page())
    assert isinstance(event, TouchEvent)
    assert len(oracle.calls) == 1
    assert llm.action_history == ["- a view with text OK that can click (1)"]
    assert oracle.calls[0]["prompt"].endswith(QUESTION_PROMPT)


def test_lifecycle_is_left_to_the_base_policy(make_llm) -> None:
    llm = make_llm(BlockingOracle())
    assert isinstance(llm.generate_event(stop_state()), AbilityEvent)
    assert llm.fetching is False


def test_failing_oracle_falls_back_to_random_touch(make_llm) -> None:
    def boom(candidates: Sequence[Event]) -> Optional[Event]:
        raise RuntimeError("service unavailable")

    llm = make_llm(ScriptedOracle(boom))
    llm.generate_event(_page())
    _wait_until(lambda: not llm.fetching)
    event = llm.generate_event(_page())
    assert isinstance(event, TouchEvent) and event.component is None
    assert llm.enabled


def test_repeated_empty_answers_end_the_session(make_llm) -> None:
    oracle = ScriptedOracle(lambda candidates: None)
    llm = make_llm(oracle, max_restarts=1)

    llm.generate_event(_page())
    _wait_until(lambda: not llm.fetching)
    first = llm.generate_event(_page())
    assert isinstance(first, TouchEvent) and first.component is None

    llm.generate_event(_page())
    _wait_until(lambda: not llm.fetching)
    assert isinstance(llm.generate_event(_page()), ExitEvent)
    assert llm.enabled is False
    assert oracle.calls == 2


def test_back_event_clears_history(make_llm) -> None:
    llm = make_llm(ScriptedOracle(lambda candidates: candidates[0]))
    llm.action_history = ["- click ok (1)"]
    state = _page()
    assert llm.get_back_event(state) is BACK_KEY_EVENT
    assert llm.action_history == []
    assert llm.base_policy.last_event is BACK_KEY_EVENT
