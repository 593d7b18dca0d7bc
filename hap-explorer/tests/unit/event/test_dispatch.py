from __future__ import annotations

import pytest
from hap_fakes import button

from hap_explorer.errors import EventDispatchError
from hap_explorer.event.dispatch import send_event
from hap_explorer.event.gesture import Gesture, GestureEvent
from hap_explorer.event.key_event import BACK_KEY_EVENT, CombinedKeyEvent
from hap_explorer.event.system_event import AbilityEvent, ExitEvent, StopHapEvent
from hap_explorer.event.ui_event import (
    Direct,
    DoubleClickEvent,
    DragEvent,
    FlingEvent,
    InputTextEvent,
    LongTouchEvent,
    ScrollEvent,
    SwipeEvent,
    TouchEvent,
)
from hap_explorer.event.wait_event import WaitEvent
from hap_explorer.model.key_code import KeyCode
from hap_explorer.model.point import Point


class _FakeSimulator:
    width = 1000
    height = 2000

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def __getattr__(self, name: str):
        def record(*args):
            self.calls.append((name, *args))

        return record


def test_wait_event_must_not_reach_the_device() -> None:
    sim = _FakeSimulator()
    with pytest.raises(EventDispatchError):
        send_event(WaitEvent("polling"), sim)
    assert sim.calls == []


def test_exit_event_is_a_no_op() -> None:
    sim = _FakeSimulator()
    send_event(ExitEvent(), sim)
    assert sim.calls == []


def test_point_events() -> None:
    sim = _FakeSimulator()
    p = Point(10, 20)
    send_event(TouchEvent(p), sim)
    send_event(LongTouchEvent(p), sim)
    send_event(DoubleClickEvent(p), sim)
    assert sim.calls == [("click", p), ("long_click", p), ("double_click", p)]


def test_input_text_clears_field_first() -> None:
    sim = _FakeSimulator()
    field = button("name", 0, 0, 200, 100, type="TextInput", clickable=False)
    send_event(InputTextEvent(field, "admin"), sim)
    centre = Point(100, 50)
    assert sim.calls == [
        ("click", centre),
        ("input_key", KeyCode.KEYCODE_CTRL_LEFT, KeyCode.KEYCODE_A),
        ("input_key", KeyCode.KEYCODE_DEL),
        ("input_text", centre, "admin"),
    ]


def test_scroll_flings_two_fifths_of_the_component() -> None:
    sim = _FakeSimulator()
    lst = button("list", 0, 0, 500, 1000, scrollable=True)
    send_event(ScrollEvent(lst, Direct.UP), sim)
    send_event(ScrollEvent(lst, Direct.LEFT, step=10, speed=100), sim)
    assert sim.calls == [
        ("fling", Point(250, 900), Point(250, 100), 60, 40000),
        ("fling", Point(50, 500), Point(450, 500), 10, 100),
    ]


def test_scroll_without_component_uses_screen_size() -> None:
    sim = _FakeSimulator()
    send_event(ScrollEvent(Point(500, 1000), Direct.DOWN), sim)
    assert sim.calls == [("fling", Point(500, 200), Point(500, 1800), 60, 40000)]


def test_swipe_family() -> None:
    sim = _FakeSimulator()
    a, b = Point(0, 0), Point(100, 100)
    send_event(SwipeEvent(a, b), sim)
    send_event(FlingEvent(a, b, step=5), sim)
    send_event(DragEvent(a, b, speed=300), sim)
    assert sim.calls == [("swipe", a, b, 600), ("fling", a, b, 5, 600), ("drag", a, b, 300)]


def test_key_lifecycle_and_gesture_events() -> None:
    sim = _FakeSimulator()
    gesture = Gesture().start(Point(1, 1))
    send_event(BACK_KEY_EVENT, sim)
    send_event(CombinedKeyEvent(KeyCode.KEYCODE_CTRL_LEFT, KeyCode.KEYCODE_V), sim)
    send_event(AbilityEvent("com.example.app", "EntryAbility"), sim)
    send_event(StopHapEvent("com.example.app"), sim)
    send_event(GestureEvent([gesture]), sim)
    assert sim.calls == [
        ("input_key", KeyCode.KEYCODE_BACK),
        ("input_key", KeyCode.KEYCODE_CTRL_LEFT, KeyCode.KEYCODE_V, None),
        ("start_ability", "com.example.app", "EntryAbility"),
        ("force_stop", "com.example.app"),
        ("inject_gesture", [gesture], 2000),
    ]
