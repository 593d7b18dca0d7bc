from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from hap_explorer.event.event import Event
from hap_explorer.model.point import Point

SAMPLE_TIME_MIN = 10
SAMPLE_TIME_MAX = 100
SAMPLE_TIME_DEFAULT = 50


@dataclass(frozen=True)
class GestureStep:
    pos: Point
    type: str
    interval_ms: Optional[int] = None

    def to_json(self) -> Dict[str, Any]:
        return {"pos": self.pos.to_json(), "type": self.type, "interval": self.interval_ms}

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "GestureStep":
        interval = data.get("interval")
        return cls(
            Point.from_json(data.get("pos") or {}),
            str(data.get("type") or ""),
            int(interval) if interval is not None else None,
        )


@dataclass
class Gesture:
    """A single-finger trajectory built step by step.

    >>> Gesture().start(Point(568, 1016), 2).move_to(Point(360, 500)).pause(2)

    Intervals are given in seconds and stored in milliseconds.
    """

    area: Optional[List[Point]] = None
    sampling_time: int = SAMPLE_TIME_DEFAULT
    steps: List[GestureStep] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not SAMPLE_TIME_MIN <= self.sampling_time <= SAMPLE_TIME_MAX:
            self.sampling_time = SAMPLE_TIME_DEFAULT

    def start(self, pos: Point, interval: Optional[float] = None) -> "Gesture":
        if self.steps:
            raise ValueError("gesture already started")
        self.steps.append(GestureStep(pos, "start", _to_ms(interval)))
        return self

    def pause(self, interval: float = 1.5) -> "Gesture":
        if not self.steps:
            raise ValueError("call start() before pause()")
        self.steps.append(GestureStep(self.steps[-1].pos, "pause", _to_ms(interval)))
        return self

    def move_to(self, pos: Point, interval: Optional[float] = None) -> "Gesture":
        if not self.steps:
            raise ValueError("call start() before move_to()")
        self.steps.append(GestureStep(pos, "move", _to_ms(interval)))
        return self

    def to_json(self) -> Dict[str, Any]:
        return {
            "area": [p.to_json() for p in self.area] if self.area else None,
            "sampling_time": self.sampling_time,
            "steps": [s.to_json() for s in self.steps],
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Gesture":
        area = data.get("area")
        return cls(
            area=[Point.from_json(p) for p in area] if area else None,
            sampling_time=int(data.get("sampling_time") or SAMPLE_TIME_DEFAULT),
            steps=[GestureStep.from_json(s) for s in data.get("steps") or []],
        )


def _to_ms(interval: Optional[float]) -> Optional[int]:
    if not interval:
        return None
    return int(interval * 1000)


class GestureEvent(Event):
    event_type = "GestureEvent"

    def __init__(self, gestures: List[Gesture], speed: int = 2000) -> None:
        super().__init__()
        self.gestures = list(gestures)
        self.speed = int(speed)

    def _fields_json(self) -> Dict[str, Any]:
        return {"gestures": [g.to_json() for g in self.gestures], "speed": self.speed}
