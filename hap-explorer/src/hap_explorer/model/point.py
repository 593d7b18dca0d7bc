from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    def to_json(self) -> Dict[str, int]:
        return {"x": int(self.x), "y": int(self.y)}

    @classmethod
    def from_json(cls, data: Any) -> "Point":
        if isinstance(data, Point):
            return data
        if isinstance(data, dict):
            return cls(int(data.get("x", 0)), int(data.get("y", 0)))
        if isinstance(data, (list, tuple)) and len(data) == 2:
            return cls(int(data[0]), int(data[1]))
        raise ValueError(f"not a point: {data!r}")
