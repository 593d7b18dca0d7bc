"""Oracle-guided policy used to escape UI tarpits.

The oracle (typically an LLM client) is slow, so it never runs on the
driver thread: `generate_event_based_on_strategy` starts at most one oracle
call on a single worker thread and answers `WaitEvent` until the result is
ready. There is no cancellation; an in-flight call always runs to the end.
"""

from __future__ import annotations

import logging
import random
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from hap_explorer.event.event import Event
from hap_explorer.event.event_builder import create_random_touch_event
from hap_explorer.event.key_event import BACK_KEY_EVENT
from hap_explorer.event.system_event import ExitEvent
from hap_explorer.event.wait_event import WaitEvent
from hap_explorer.model.device_state import DeviceState
from hap_explorer.policy.input_policy import InputPolicy, PolicyName
from hap_explorer.policy.prompt_builder import build_prompt, create_action_prompt_with_events
from hap_explorer.policy.utg_input_policy import UtgInputPolicy


@runtime_checkable
class EventOracle(Protocol):
    def select_event(self, candidates: Sequence[Event], context: Dict[str, Any]) -> Optional[Event]: ...


class LlmGuidedPolicy(InputPolicy):
    def __init__(
        self,
        base_policy: UtgInputPolicy,
        oracle: EventOracle,
        *,
        max_restarts: Optional[int] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(base_policy.device, base_policy.hap, PolicyName.LLM, logger=logger)
        self.base_policy = base_policy
        self.utg = base_policy.utg
        self.oracle = oracle
        self.max_restarts = base_policy.max_restarts if max_restarts is None else int(max_restarts)
        self.rng = rng or random.Random()

        self.action_history: List[str] = []
        self.retry_count = 0
        self.current_state: Optional[DeviceState] = None

        self._lock = threading.Lock()
        self._pending_event: Optional[Event] = None
        self._fetching = False
        self._future: Optional[Future] = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="hap-explorer-oracle")

    @property
    def fetching(self) -> bool:
        with self._lock:
            return self._fetching

    def generate_event(self, state: DeviceState) -> Event:
        self.current_state = state
        self.base_policy.update_utg(state)
        if not (state.is_foreground() and state.page.bundle_name == self.hap.bundle_name):
            # Lifecycle handling stays with the base policy.
            return self.base_policy.generate_event(state)

        event = self.generate_event_based_on_strategy()
        self.base_policy.note_event(state, event)
        return event

    def generate_event_based_on_strategy(self) -> Event:
        with self._lock:
            if self._pending_event is not None:
                event = self._pending_event
                self._pending_event = None
                return event
            if self._fetching:
                return WaitEvent("oracle call in flight")
            self._fetching = True

        try:
            candidates, context = self._build_request()
            self.logger.info("starting oracle call with %d candidate(s)", len(candidates))
            self._future = self._executor.submit(self._fetch, candidates, context)
        except BaseException:
            with self._lock:
                self._fetching = False
            raise
        return WaitEvent("oracle call started")

    def _build_request(self) -> Tuple[List[Event], Dict[str, Any]]:
        state = self.current_state
        if state is None:
            return [], {}
        components = self.base_policy.get_components(state)
        action_prompt, candidates, actions = create_action_prompt_with_events(components, self.rng)

        # First steps towards unexplored reachable states are offered too.
        for target in self.utg.get_reachable_states(state):
            if self.utg.is_state_explored(target) or target.page.bundle_name != self.hap.bundle_name:
                continue
            steps = self.utg.get_navigation_steps(state, target)
            if steps:
                candidates.append(steps[0][1])
                actions.append(f"- go to ability {target.page.ability_name} ({len(candidates)})")

        prompt = build_prompt(
            state.page.ability_name,
            self.utg.get_explored_abilities(),
            self.action_history,
            action_prompt,
        )
        self.logger.debug("%s", prompt)
        context = {
            "prompt": prompt,
            "actions": list(actions),
            "action_history": list(self.action_history),
            "explored_abilities": self.utg.get_explored_abilities(),
            "ability_name": state.page.ability_name,
        }
        return candidates, context

    def _fetch(self, candidates: List[Event], context: Dict[str, Any]) -> None:
        event: Optional[Event]
        try:
            event = self.oracle.select_event(candidates, context) if candidates else None
        except Exception as exc:
            self.logger.error("oracle select_event failed: %s", exc)
            event = self._random_touch()
        else:
            if event is None:
                if self.retry_count >= self.max_restarts:
                    self.logger.info("oracle gave no answer %d times, stopping", self.retry_count)
                    self.stop()
                    event = ExitEvent()
                else:
                    self.retry_count += 1
                    event = self._random_touch()
            else:
                self.retry_count = 0
                self._remember_action(event, candidates, context.get("actions") or [])
                self.logger.info("oracle selected %s", event)

        with self._lock:
            self._pending_event = event
            self._fetching = False

    def _remember_action(self, event: Event, candidates: List[Event], actions: List[str]) -> None:
        for idx, candidate in enumerate(candidates):
            if candidate is event and idx < len(actions):
                self.action_history.append(actions[idx])
                return
        self.action_history.append(str(event))

    def _random_touch(self) -> Event:
        return create_random_touch_event(self.device.width, self.device.height, self.rng)

    def clear_action_history(self) -> None:
        self.action_history = []

    def get_back_event(self, state: Optional[DeviceState] = None) -> Event:
        self.clear_action_history()
        self.logger.info("leaving tarpit with BACK, action history cleared")
        if state is not None:
            self.base_policy.update_utg(state)
            self.base_policy.note_event(state, BACK_KEY_EVENT)
        return BACK_KEY_EVENT

    def close(self) -> None:
        self._executor.shutdown(wait=True)
