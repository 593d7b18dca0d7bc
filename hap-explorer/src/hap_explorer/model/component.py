from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from hap_explorer.model.point import Point
from hap_explorer.model.rank import Rank
from hap_explorer.model.signature import _json_dumps_canonical


class ComponentType(str, Enum):
    MODAL_PAGE = "ModalPage"
    DIALOG = "Dialog"
    TEXT_INPUT = "TextInput"
    TEXT_AREA = "TextArea"
    SEARCH_FIELD = "SearchField"


_TEXT_INPUTABLE_TYPES = {
    ComponentType.TEXT_INPUT.value,
    ComponentType.TEXT_AREA.value,
    ComponentType.SEARCH_FIELD.value,
}

_BOUNDS_RE = re.compile(r"\[(-?\d+),(-?\d+)\]")

_BOOL_FIELDS = (
    "checkable",
    "checked",
    "clickable",
    "enabled",
    "focused",
    "long_clickable",
    "scrollable",
    "selected",
    "visible",
)

_STR_FIELDS = (
    "accessibility_id",
    "description",
    "hint",
    "host_window_id",
    "id",
    "key",
    "text",
    "type",
)

# camelCase keys emitted by the device dumper.
_JSON_ALIASES = {
    "accessibilityId": "accessibility_id",
    "hostWindowId": "host_window_id",
    "longClickable": "long_clickable",
}


def _parse_bounds(value: Any) -> List[Point]:
    if value is None:
        return [Point(0, 0), Point(0, 0)]
    if isinstance(value, str):
        pts = [Point(int(m.group(1)), int(m.group(2))) for m in _BOUNDS_RE.finditer(value)]
    elif isinstance(value, (list, tuple)) and len(value) == 4 and all(
        isinstance(v, (int, float)) for v in value
    ):
        pts = [Point(int(value[0]), int(value[1])), Point(int(value[2]), int(value[3]))]
    elif isinstance(value, (list, tuple)):
        pts = [Point.from_json(v) for v in value]
    else:
        raise ValueError(f"unsupported bounds: {value!r}")
    if len(pts) != 2:
        raise ValueError(f"bounds must have exactly two points: {value!r}")
    return pts


@dataclass(eq=False)
class Component:
    """One node of a page's view tree."""

    type: str = ""
    bounds: List[Point] = field(default_factory=lambda: [Point(0, 0), Point(0, 0)])
    accessibility_id: str = ""
    id: str = ""
    key: str = ""
    text: str = ""
    description: str = ""
    hint: str = ""
    host_window_id: str = ""
    checkable: bool = False
    checked: bool = False
    clickable: bool = False
    enabled: bool = True
    focused: bool = False
    long_clickable: bool = False
    scrollable: bool = False
    selected: bool = False
    visible: bool = True
    children: List["Component"] = field(default_factory=list)
    rank: int = Rank.NORMAL
    parent: Optional["Component"] = field(default=None, repr=False)

    def add_child(self, child: "Component") -> None:
        child.parent = self
        self.children.append(child)

    @property
    def inputable(self) -> bool:
        return self.type in _TEXT_INPUTABLE_TYPES

    @property
    def unique_id(self) -> str:
        (x1, y1), (x2, y2) = ((p.x, p.y) for p in self.bounds)
        return f"{self.type}[{x1},{y1}][{x2},{y2}]"

    def has_ui_event(self) -> bool:
        return self.enabled and (
            self.checkable
            or self.clickable
            or self.long_clickable
            or self.scrollable
            or self.inputable
        )

    def get_center_point(self) -> Point:
        a, b = self.bounds
        return Point(round((a.x + b.x) / 2), round((a.y + b.y) / 2))

    def get_width(self) -> int:
        a, b = self.bounds
        return abs(a.x - b.x)

    def get_height(self) -> int:
        a, b = self.bounds
        return abs(a.y - b.y)

    def walk(self) -> Iterator["Component"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def collect(self, selector: Callable[["Component"], bool]) -> List["Component"]:
        return [c for c in self.walk() if selector(c)]

    def _sort_key(self) -> Tuple[Any, ...]:
        (x1, y1), (x2, y2) = ((p.x, p.y) for p in self.bounds)
        return (y1, x1, y2, x2, self.type, self.id, self.key)

    def to_json(self, *, with_children: bool = True) -> Dict[str, Any]:
        """Serialize the component.

        Typed text of input components is blanked, and children are emitted in
        a canonical order, so the result can be hashed directly.
        """
        out: Dict[str, Any] = {
            "bounds": [p.to_json() for p in self.bounds],
        }
        for name in _STR_FIELDS:
            out[name] = str(getattr(self, name) or "")
        for name in _BOOL_FIELDS:
            out[name] = bool(getattr(self, name))
        if self.inputable:
            out["text"] = ""
        if with_children:
            # Siblings with identical bounds fall back to their serialized form.
            children = [(c._sort_key(), c.to_json()) for c in self.children]
            children.sort(key=lambda kv: (kv[0], _json_dumps_canonical(kv[1])))
            out["children"] = [data for _, data in children]
        return out

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Component":
        if not isinstance(data, dict):
            raise ValueError(f"component must be an object, got {type(data).__name__}")
        norm = {_JSON_ALIASES.get(k, k): v for k, v in data.items()}
        kwargs: Dict[str, Any] = {"bounds": _parse_bounds(norm.get("bounds"))}
        for name in _STR_FIELDS:
            if norm.get(name) is not None:
                kwargs[name] = str(norm[name])
        for name in _BOOL_FIELDS:
            if norm.get(name) is not None:
                kwargs[name] = bool(norm[name])
        component = cls(**kwargs)
        for child in norm.get("children") or []:
            component.add_child(cls.from_json(child))
        return component
