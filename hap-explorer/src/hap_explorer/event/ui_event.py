from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Union

from hap_explorer.event.event import Event
from hap_explorer.model.component import Component
from hap_explorer.model.point import Point
from hap_explorer.model.rank import Rank


class Direct(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"


Target = Union[Component, Point]


class UIEvent(Event):
    """An event aimed at a point, optionally bound to the component under it."""

    def __init__(self, target: Target, *, rank: Optional[int] = None) -> None:
        self.component: Optional[Component]
        if isinstance(target, Component):
            self.component = target
            self.point = target.get_center_point()
            inherited = target.rank
        else:
            self.component = None
            self.point = Point.from_json(target)
            inherited = Rank.NORMAL
        super().__init__(rank=inherited if rank is None else rank)

    def get_component_id(self) -> Optional[str]:
        return self.component.unique_id if self.component is not None else None

    def _fields_json(self) -> Dict[str, Any]:
        return {
            "component": (
                self.component.to_json(with_children=False) if self.component is not None else None
            ),
            "point": self.point.to_json(),
        }


class TouchEvent(UIEvent):
    event_type = "TouchEvent"


class LongTouchEvent(UIEvent):
    event_type = "LongTouchEvent"


class DoubleClickEvent(UIEvent):
    event_type = "DoubleClickEvent"


class ScrollEvent(UIEvent):
    event_type = "ScrollEvent"

    def __init__(
        self,
        target: Target,
        direct: Union[Direct, str],
        step: int = 60,
        speed: int = 40000,
        *,
        rank: Optional[int] = None,
    ) -> None:
        super().__init__(target, rank=rank)
        self.direct = Direct(direct)
        self.step = int(step)
        self.speed = int(speed)

    def _fields_json(self) -> Dict[str, Any]:
        out = super()._fields_json()
        out.update({"direct": self.direct.value, "step": self.step, "speed": self.speed})
        return out


class InputTextEvent(UIEvent):
    event_type = "InputTextEvent"

    def __init__(self, target: Target, text: str, *, rank: Optional[int] = None) -> None:
        super().__init__(target, rank=rank)
        self.text = str(text)

    def _fields_json(self) -> Dict[str, Any]:
        out = super()._fields_json()
        out["text"] = self.text
        return out


class SwipeEvent(UIEvent):
    event_type = "SwipeEvent"

    def __init__(
        self,
        source: Target,
        to: Target,
        speed: int = 600,
        *,
        rank: Optional[int] = None,
    ) -> None:
        super().__init__(source, rank=rank)
        if isinstance(to, Component):
            self.to_component: Optional[Component] = to
            self.to_point = to.get_center_point()
        else:
            self.to_component = None
            self.to_point = Point.from_json(to)
        self.speed = int(speed)

    def _fields_json(self) -> Dict[str, Any]:
        out = super()._fields_json()
        out.update(
            {
                "to_point": self.to_point.to_json(),
                "to_component": (
                    self.to_component.to_json(with_children=False)
                    if self.to_component is not None
                    else None
                ),
                "speed": self.speed,
            }
        )
        return out


class FlingEvent(SwipeEvent):
    event_type = "FlingEvent"

    def __init__(
        self,
        source: Target,
        to: Target,
        step: int = 60,
        speed: int = 600,
        *,
        rank: Optional[int] = None,
    ) -> None:
        super().__init__(source, to, speed, rank=rank)
        self.step = int(step)

    def _fields_json(self) -> Dict[str, Any]:
        out = super()._fields_json()
        out["step"] = self.step
        return out


class DragEvent(SwipeEvent):
    event_type = "DragEvent"
