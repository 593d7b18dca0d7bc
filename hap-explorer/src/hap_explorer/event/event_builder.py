"""Construction of events: from persisted JSON, from components, at random."""

from __future__ import annotations

import random
import string
from typing import Any, Dict, Iterable, List, Optional

from hap_explorer.errors import UnsupportedEventError
from hap_explorer.event.event import Event
from hap_explorer.event.gesture import Gesture, GestureEvent
from hap_explorer.event.key_event import CombinedKeyEvent, KeyEvent
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
    UIEvent,
)
from hap_explorer.event.wait_event import WaitEvent
from hap_explorer.model.component import Component
from hap_explorer.model.point import Point

RANDOM_TEXT_LENGTHS = (1, 8, 32, 128)


def _gen_random_texts(lengths: Iterable[int], seed: int = 0) -> List[str]:
    # Fixed seed: the texts feed event signatures, which must match across sessions.
    rng = random.Random(seed)
    alphabet = string.ascii_letters + string.digits
    return ["".join(rng.choice(alphabet) for _ in range(n)) for n in lengths]


RANDOM_TEXTS: List[str] = _gen_random_texts(RANDOM_TEXT_LENGTHS)


def _target(data: Dict[str, Any], component_key: str, point_key: str) -> Any:
    comp = data.get(component_key)
    if comp:
        return Component.from_json(comp)
    if data.get(point_key) is None:
        raise UnsupportedEventError(f"{data.get('type')} without {component_key!r} or {point_key!r}")
    return Point.from_json(data[point_key])


def create_event_from_json(data: Dict[str, Any]) -> Event:
    """Rebuild an event from its `to_json()` form."""
    if not isinstance(data, dict):
        raise UnsupportedEventError(f"event must be an object, got {type(data).__name__}")
    event_type = data.get("type")

    if event_type == "KeyEvent":
        return KeyEvent(int(data["key_code"]))
    if event_type == "CombinedKeyEvent":
        return CombinedKeyEvent(int(data["key_code"]), int(data["key_code1"]), data.get("key_code2"))
    if event_type == "AbilityEvent":
        return AbilityEvent(str(data["bundle_name"]), str(data["ability_name"]))
    if event_type == "StopHapEvent":
        return StopHapEvent(str(data["bundle_name"]))
    if event_type == "ExitEvent":
        return ExitEvent()
    if event_type == "WaitEvent":
        return WaitEvent(str(data.get("reason") or ""))
    if event_type == "GestureEvent":
        gestures = [Gesture.from_json(g) for g in data.get("gestures") or []]
        return GestureEvent(gestures, int(data.get("speed") or 2000))

    if event_type == "TouchEvent":
        return TouchEvent(_target(data, "component", "point"))
    if event_type == "LongTouchEvent":
        return LongTouchEvent(_target(data, "component", "point"))
    if event_type == "DoubleClickEvent":
        return DoubleClickEvent(_target(data, "component", "point"))
    if event_type == "ScrollEvent":
        return ScrollEvent(
            _target(data, "component", "point"),
            data["direct"],
            int(data.get("step", 60)),
            int(data.get("speed", 40000)),
        )
    if event_type == "InputTextEvent":
        return InputTextEvent(_target(data, "component", "point"), str(data.get("text") or ""))
    if event_type == "SwipeEvent":
        return SwipeEvent(
            _target(data, "component", "point"),
            _target(data, "to_component", "to_point"),
            int(data.get("speed", 600)),
        )
    if event_type == "FlingEvent":
        return FlingEvent(
            _target(data, "component", "point"),
            _target(data, "to_component", "to_point"),
            int(data.get("step", 60)),
            int(data.get("speed", 600)),
        )
    if event_type == "DragEvent":
        return DragEvent(
            _target(data, "component", "point"),
            _target(data, "to_component", "to_point"),
            int(data.get("speed", 600)),
        )

    raise UnsupportedEventError(f"unsupported event type: {event_type!r}")


def create_component_possible_ui_events(component: Component) -> List[UIEvent]:
    events: List[UIEvent] = []
    if not component.enabled:
        return events
    if component.checkable or component.clickable:
        events.append(TouchEvent(component))
    if component.long_clickable:
        events.append(LongTouchEvent(component))
    if component.scrollable:
        for direct in (Direct.DOWN, Direct.UP, Direct.LEFT, Direct.RIGHT):
            events.append(ScrollEvent(component, direct))
    if component.inputable:
        for text in RANDOM_TEXTS:
            events.append(InputTextEvent(component, text))
    return events


def create_possible_ui_events(components: Iterable[Component]) -> List[UIEvent]:
    events: List[UIEvent] = []
    for component in components:
        if component.has_ui_event():
            events.extend(create_component_possible_ui_events(component))
    return events


def create_random_touch_event(width: int, height: int, rng: Optional[random.Random] = None) -> TouchEvent:
    rng = rng or random.Random()
    return TouchEvent(Point(rng.randint(0, max(0, int(width))), rng.randint(0, max(0, int(height)))))
