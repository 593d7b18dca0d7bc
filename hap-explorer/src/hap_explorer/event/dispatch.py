"""Physical dispatch of events through an event simulator.

`send_event` is the only place that turns an `Event` into simulator calls.
"""

from __future__ import annotations

from functools import singledispatch
from typing import Any

from hap_explorer.errors import EventDispatchError
from hap_explorer.event.event import Event
from hap_explorer.event.gesture import GestureEvent
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
)
from hap_explorer.event.wait_event import WaitEvent
from hap_explorer.model.key_code import KeyCode
from hap_explorer.model.point import Point


@singledispatch
def send_event(event: Event, simulator: Any) -> None:
    raise EventDispatchError(f"no dispatcher for {type(event).__name__}")


@send_event.register
def _(event: WaitEvent, simulator: Any) -> None:
    raise EventDispatchError(f"WaitEvent must not be dispatched: {event.reason}")


@send_event.register
def _(event: ExitEvent, simulator: Any) -> None:
    return None


@send_event.register
def _(event: TouchEvent, simulator: Any) -> None:
    simulator.click(event.point)


@send_event.register
def _(event: LongTouchEvent, simulator: Any) -> None:
    simulator.long_click(event.point)


@send_event.register
def _(event: DoubleClickEvent, simulator: Any) -> None:
    simulator.double_click(event.point)


@send_event.register
def _(event: ScrollEvent, simulator: Any) -> None:
    if event.component is not None:
        width, height = event.component.get_width(), event.component.get_height()
    else:
        width, height = simulator.width, simulator.height
    dx = round(width * 2 / 5)
    dy = round(height * 2 / 5)
    x, y = event.point.x, event.point.y
    if event.direct is Direct.UP:
        start, end = Point(x, y + dy), Point(x, y - dy)
    elif event.direct is Direct.DOWN:
        start, end = Point(x, y - dy), Point(x, y + dy)
    elif event.direct is Direct.LEFT:
        start, end = Point(x - dx, y), Point(x + dx, y)
    else:
        start, end = Point(x + dx, y), Point(x - dx, y)
    simulator.fling(start, end, event.step, event.speed)


@send_event.register
def _(event: InputTextEvent, simulator: Any) -> None:
    simulator.click(event.point)
    simulator.input_key(KeyCode.KEYCODE_CTRL_LEFT, KeyCode.KEYCODE_A)
    simulator.input_key(KeyCode.KEYCODE_DEL)
    simulator.input_text(event.point, event.text)


@send_event.register
def _(event: SwipeEvent, simulator: Any) -> None:
    simulator.swipe(event.point, event.to_point, event.speed)


@send_event.register
def _(event: FlingEvent, simulator: Any) -> None:
    simulator.fling(event.point, event.to_point, event.step, event.speed)


@send_event.register
def _(event: DragEvent, simulator: Any) -> None:
    simulator.drag(event.point, event.to_point, event.speed)


@send_event.register
def _(event: KeyEvent, simulator: Any) -> None:
    simulator.input_key(event.key_code)


@send_event.register
def _(event: CombinedKeyEvent, simulator: Any) -> None:
    simulator.input_key(event.key_code, event.key_code1, event.key_code2)


@send_event.register
def _(event: GestureEvent, simulator: Any) -> None:
    simulator.inject_gesture(event.gestures, event.speed)


@send_event.register
def _(event: AbilityEvent, simulator: Any) -> None:
    simulator.start_ability(event.bundle_name, event.ability_name)


@send_event.register
def _(event: StopHapEvent, simulator: Any) -> None:
    simulator.force_stop(event.bundle_name)
