from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List

import pytest

from hap_fakes import HAP, FakeDevice

from hap_explorer.config.options import FuzzOptions
from hap_explorer.event.event import Event
from hap_explorer.event.key_event import BACK_KEY_EVENT
from hap_explorer.event.system_event import AbilityEvent, ExitEvent
from hap_explorer.event.ui_event import TouchEvent
from hap_explorer.event.wait_event import WaitEvent
from hap_explorer.examples.toy_device import (
    TOY_ABILITY,
    TOY_BUNDLE,
    ToyDevice,
    ToyScreen,
    build_toy_app,
    toy_button,
    toy_page,
)
from hap_explorer.model.hap import Hap
from hap_explorer.model.point import Point
from hap_explorer.policy.input_policy import PolicyName
from hap_explorer.runtime.runner import MAX_TRY_COUNT, RunnerManager


class ScriptedPolicy:
    name = PolicyName.NAIVE

    def __init__(self, events: List[Event]) -> None:
        self.events = list(events)
        self.enabled = True

    def generate_event(self, state) -> Event:
        if len(self.events) > 1:
            return self.events.pop(0)
        return self.events[0]


class FakeLlm:
    def __init__(self) -> None:
        self.generated = 0
        self.backs = 0
        self.clears = 0
        self.closed = False

    def generate_event(self, state) -> Event:
        self.generated += 1
        return TouchEvent(Point(5, 5))

    def get_back_event(self, state=None) -> Event:
        self.backs += 1
        return BACK_KEY_EVENT

    def clear_action_history(self) -> None:
        self.clears += 1

    def close(self) -> None:
        self.closed = True


class AlwaysTarpit:
    def is_tarpit(self, prev_screen, cur_screen) -> bool:
        return True


def _options(**kwargs) -> FuzzOptions:
    kwargs.setdefault("bundle_name", TOY_BUNDLE)
    kwargs.setdefault("event_interval_s", 0)
    return FuzzOptions(**kwargs)


def test_explores_toy_app_and_persists_results(tmp_path: Path) -> None:
    device = ToyDevice(output_dir=tmp_path)
    hap = Hap(TOY_BUNDLE, TOY_ABILITY)
    options = _options(policy_name="greedy_dfs", random_input=False, max_steps=25)
    runner = RunnerManager(device, hap, options, sleep=lambda s: None)

    steps = runner.start()

    assert 0 < steps <= 25
    assert steps == len(device.sent)
    assert isinstance(device.sent[0], AbilityEvent)
    assert len(list((tmp_path / "events").glob("event_*.json"))) == steps

    utg = json.loads((tmp_path / "utg.json").read_text(encoding="utf-8"))
    pages = {node["page_path"] for node in utg["nodes"]}
    assert {"pages/Index", "pages/Detail", "pages/Settings"} <= pages


def test_tarpit_hands_control_to_llm_then_backs_out(tmp_path: Path) -> None:
    llm = FakeLlm()
    runner = RunnerManager(
        FakeDevice(output_dir=tmp_path),
        HAP,
        _options(bundle_name=HAP.bundle_name, max_steps=MAX_TRY_COUNT + 3),
        policy=ScriptedPolicy([TouchEvent(Point(1, 1))]),
        llm_policy=llm,
        tarpit_detector=AlwaysTarpit(),
        sleep=lambda s: None,
    )

    assert runner.start() == MAX_TRY_COUNT + 3
    assert llm.generated == MAX_TRY_COUNT + 1
    assert llm.backs == 1
    assert llm.clears == 1
    assert llm.closed is True


def test_wait_events_poll_without_dispatch(tmp_path: Path) -> None:
    sleeps: List[float] = []
    device = FakeDevice(output_dir=tmp_path)
    policy = ScriptedPolicy([WaitEvent(), WaitEvent(), TouchEvent(Point(1, 1)), ExitEvent()])
    runner = RunnerManager(
        device,
        HAP,
        _options(bundle_name=HAP.bundle_name, event_interval_s=0.25, wait_poll_interval_s=0.5),
        policy=policy,
        sleep=sleeps.append,
    )

    assert runner.start() == 1
    assert sleeps == [0.5, 0.5, 0.25]
    assert len(device.sent) == 1
    assert runner.enabled is False


def test_stop_ends_the_loop(tmp_path: Path) -> None:
    runner = RunnerManager(
        FakeDevice(output_dir=tmp_path),
        HAP,
        _options(bundle_name=HAP.bundle_name),
        policy=ScriptedPolicy([TouchEvent(Point(1, 1))]),
        sleep=lambda s: None,
    )
    runner.stop()
    assert runner.start() == 0
    assert not (tmp_path / "events").exists()


def _app_with_text_fields() -> Dict[str, ToyScreen]:
    screens = build_toy_app()
    screens["main"] = ToyScreen(
        toy_page(
            "pages/Index",
            toy_button("detail", [0, 200, 1080, 400], text="Detail"),
            toy_button("settings", [0, 500, 1080, 700], text="Settings"),
            toy_button("search", [0, 800, 1080, 900], type="TextInput"),
            toy_button("go", [0, 1000, 1080, 1100], text="Form"),
        ),
        {"detail": "detail", "settings": "settings", "go": "form"},
    )
    screens["form"] = ToyScreen(toy_page("pages/Form", toy_button("name", [0, 200, 1080, 300], type="TextInput")))
    return screens


@pytest.mark.parametrize("policy_name", ["naive", "bfs_naive", "greedy_dfs", "greedy_bfs"])
@pytest.mark.parametrize("random_input", [True, False])
def test_unbounded_run_ends_on_its_own(tmp_path: Path, policy_name: str, random_input: bool) -> None:
    device = ToyDevice(_app_with_text_fields(), output_dir=tmp_path)
    options = _options(policy_name=policy_name, random_input=random_input, seed=3, max_steps=0)
    runner = RunnerManager(device, Hap(TOY_BUNDLE, TOY_ABILITY), options, sleep=lambda s: None)

    steps = runner.start()

    assert isinstance(runner.policy.last_event, ExitEvent)
    assert runner.policy.enabled is False
    assert runner.enabled is False
    assert steps == len(device.sent)
    pages = {node["page_path"] for node in json.loads((tmp_path / "utg.json").read_text(encoding="utf-8"))["nodes"]}
    assert {"pages/Index", "pages/Detail", "pages/Settings", "pages/Form"} <= pages
