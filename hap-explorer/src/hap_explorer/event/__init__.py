"""Input events the explorer can inject, their construction and dispatch."""

from __future__ import annotations

from hap_explorer.event.dispatch import send_event
from hap_explorer.event.event import Event
from hap_explorer.event.event_builder import (
    create_event_from_json,
    create_possible_ui_events,
    create_random_touch_event,
)
from hap_explorer.event.gesture import Gesture, GestureEvent, GestureStep
from hap_explorer.event.key_event import BACK_KEY_EVENT, HOME_KEY_EVENT, CombinedKeyEvent, KeyEvent
from hap_explorer.event.system_event import AbilityEvent, ExitEvent, StopHapEvent, SystemEvent
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

__all__ = [
    "AbilityEvent",
    "BACK_KEY_EVENT",
    "CombinedKeyEvent",
    "Direct",
    "DoubleClickEvent",
    "DragEvent",
    "Event",
    "ExitEvent",
    "FlingEvent",
    "Gesture",
    "GestureEvent",
    "GestureStep",
    "HOME_KEY_EVENT",
    "InputTextEvent",
    "KeyEvent",
    "LongTouchEvent",
    "ScrollEvent",
    "StopHapEvent",
    "SwipeEvent",
    "SystemEvent",
    "TouchEvent",
    "UIEvent",
    "WaitEvent",
    "create_event_from_json",
    "create_possible_ui_events",
    "create_random_touch_event",
    "send_event",
]
