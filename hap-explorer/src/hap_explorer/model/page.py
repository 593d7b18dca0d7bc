from __future__ import annotations

from functools import cached_property
from typing import Any, Callable, Dict, Iterable, List, Optional

from hap_explorer.model.component import Component, ComponentType
from hap_explorer.model.hap import HapRunningState
from hap_explorer.model.signature import stable_sha256


class Page:
    """A UI page: the view tree plus the ability/bundle/page path showing it.

    Pages are treated as immutable once built; only the (non-serialized)
    rank of their components may change.
    """

    def __init__(
        self,
        root: Component,
        ability_name: str,
        bundle_name: str,
        page_path: str,
    ) -> None:
        self.root = root
        self.ability_name = ability_name
        self.bundle_name = bundle_name
        self.page_path = page_path

    def get_components(self) -> List[Component]:
        return list(self.root.walk())

    def select_components(self, selector: Callable[[Component], bool]) -> List[Component]:
        return self.root.collect(selector)

    def select_components_by_type(self, types: Iterable[str]) -> List[Component]:
        wanted = {t.value if isinstance(t, ComponentType) else str(t) for t in types}
        return self.select_components(lambda item: item.type in wanted)

    def get_dialogs(self) -> List[Component]:
        return self.select_components_by_type([ComponentType.MODAL_PAGE, ComponentType.DIALOG])

    def get_content(self) -> Dict[str, Any]:
        return {
            "view_tree": self.root.to_json(),
            "ability_name": self.ability_name,
            "bundle_name": self.bundle_name,
            "page_path": self.page_path,
        }

    def get_structure(self) -> Dict[str, Any]:
        # Same traversal order as the content tree so equal content implies
        # equal structure.
        return {
            "view_tree": _canonical_structure(self.root.to_json()),
            "ability_name": self.ability_name,
            "bundle_name": self.bundle_name,
            "page_path": self.page_path,
        }

    @cached_property
    def content_sig(self) -> str:
        return stable_sha256(self.get_content())

    @cached_property
    def structural_sig(self) -> str:
        return stable_sha256(self.get_structure())

    def is_stop(self) -> bool:
        return self.content_sig == STOP_PAGE.content_sig

    def is_background(self) -> bool:
        return self.content_sig == BACKGROUND_PAGE.content_sig

    def is_foreground(self) -> bool:
        return not (self.is_stop() or self.is_background())

    def to_json(self) -> Dict[str, Any]:
        return self.get_content()

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Page":
        return cls(
            Component.from_json(data.get("view_tree") or {}),
            str(data.get("ability_name") or ""),
            str(data.get("bundle_name") or ""),
            str(data.get("page_path") or ""),
        )

    def __repr__(self) -> str:
        return f"Page({self.bundle_name}/{self.ability_name}:{self.page_path} {self.content_sig[:8]})"


def _canonical_structure(node: Dict[str, Any], out: Optional[List[Dict[str, str]]] = None) -> List[Dict[str, str]]:
    if out is None:
        out = []
    out.append({"accessibility_id": node["accessibility_id"], "type": node["type"]})
    for child in node.get("children", []):
        _canonical_structure(child, out)
    return out


STOP_PAGE = Page(Component(), "", "", HapRunningState.STOP.value)
BACKGROUND_PAGE = Page(Component(), "", "", HapRunningState.BACKGROUND.value)
