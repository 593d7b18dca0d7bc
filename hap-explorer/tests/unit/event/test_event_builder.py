from __future__ import annotations

import random

import pytest
from hap_fakes import button

from hap_explorer.errors import UnsupportedEventError
from hap_explorer.event.event_builder import (
    RANDOM_TEXTS,
    create_event_from_json,
    create_possible_ui_events,
    create_random_touch_event,
)
from hap_explorer.event.gesture import Gesture, GestureEvent
from hap_explorer.event.key_event import BACK_KEY_EVENT, CombinedKeyEvent
from hap_explorer.event.system_event import AbilityEvent, ExitEvent
from hap_explorer.event.ui_event import (
    Direct,
    FlingEvent,
    InputTextEvent,
    LongTouchEvent,
    ScrollEvent,
    TouchEvent,
)
from hap_explorer.model.key_code import KeyCode
from hap_explorer.model.point import Point
from hap_explorer.model.rank import Rank


def test_possible_ui_events_per_capability() -> None:
    clickable = button("ok")
    long_only = button("hold", clickable=False, long_clickable=True)
    scroller = button("list", clickable=False, scrollable=True)
    field = button("name", clickable=False, type="TextInput")
    disabled = button("off", enabled=False)

    events = create_possible_ui_events([clickable, long_only, scroller, field, disabled])
    kinds = [type(e) for e in events]
    assert kinds.count(TouchEvent) == 1
    assert kinds.count(LongTouchEvent) == 1
    assert kinds.count(ScrollEvent) == 4
    assert kinds.count(InputTextEvent) == len(RANDOM_TEXTS) == 4
    assert {e.direct for e in events if isinstance(e, ScrollEvent)} == set(Direct)
    assert all(e.component is not disabled for e in events)


def test_random_texts_are_fixed_lengths() -> None:
    assert [len(t) for t in RANDOM_TEXTS] == [1, 8, 32, 128]


def test_ui_event_inherits_component_rank_and_centre() -> None:
    comp = button("ok", 0, 0, 100, 50)
    comp.rank = Rank.HIGH
    event = TouchEvent(comp)
    assert event.rank == Rank.HIGH
    assert event.point == Point(50, 25)
    assert "rank" not in event.to_json()
    assert TouchEvent(Point(1, 2)).rank == Rank.NORMAL


def test_event_json_is_rebuilt_faithfully() -> None:
    comp = button("ok", text="OK")
    gesture = Gesture().start(Point(10, 10), 0.5).move_to(Point(100, 100)).pause(1)
    events = [
        TouchEvent(comp),
        ScrollEvent(comp, Direct.UP, step=30),
        InputTextEvent(Point(5, 5), "hello"),
        FlingEvent(Point(0, 0), comp, step=20, speed=900),
        CombinedKeyEvent(KeyCode.KEYCODE_CTRL_LEFT, KeyCode.KEYCODE_A),
        BACK_KEY_EVENT,
        AbilityEvent("com.example.app", "EntryAbility"),
        ExitEvent(),
        GestureEvent([gesture], speed=1500),
    ]
    for event in events:
        rebuilt = create_event_from_json(event.to_json())
        assert type(rebuilt) is type(event)
        assert rebuilt.to_json() == event.to_json()


def test_gesture_steps_store_milliseconds() -> None:
    gesture = Gesture(sampling_time=5).start(Point(1, 1), 2).pause()
    assert gesture.sampling_time == 50
    assert [s.interval_ms for s in gesture.steps] == [2000, 1500]
    assert gesture.steps[1].pos == Point(1, 1)
    with pytest.raises(ValueError):
        gesture.start(Point(0, 0))
    with pytest.raises(ValueError):
        Gesture().move_to(Point(0, 0))


def test_unknown_event_type_is_rejected() -> None:
    with pytest.raises(UnsupportedEventError):
        create_event_from_json({"type": "TeleportEvent"})
    with pytest.raises(UnsupportedEventError):
        create_event_from_json({"type": "TouchEvent"})
    with pytest.raises(ValueError):
        create_event_from_json(["TouchEvent"])


def test_random_touch_stays_on_screen() -> None:
    rng = random.Random(3)
    for _ in range(50):
        event = create_random_touch_event(1080, 1920, rng)
        assert 0 <= event.point.x <= 1080
        assert 0 <= event.point.y <= 1920
        assert event.component is None
