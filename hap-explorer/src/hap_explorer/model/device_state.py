from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Set

from hap_explorer.model.page import Page

if TYPE_CHECKING:
    from hap_explorer.event.ui_event import UIEvent


class DeviceState:
    """A snapshot of the device: the foreground page plus crash markers."""

    def __init__(
        self,
        page: Page,
        *,
        udid: str = "",
        width: int = 0,
        height: int = 0,
        screen: Optional[str] = None,
        origin_logs: Optional[Iterable[str]] = None,
    ) -> None:
        self.page = page
        self.udid = udid
        self.width = int(width)
        self.height = int(height)
        self.screen = screen
        self.origin_logs: Set[str] = set(origin_logs or ())
        self.fault_logs: Set[str] = set()

    @property
    def content_sig(self) -> str:
        return self.page.content_sig

    @property
    def structural_sig(self) -> str:
        return self.page.structural_sig

    def is_stop(self) -> bool:
        return self.page.is_stop()

    def is_background(self) -> bool:
        return self.page.is_background()

    def is_foreground(self) -> bool:
        return self.page.is_foreground()

    def get_page_key(self) -> str:
        return f"{self.page.ability_name}:{self.page.page_path}"

    def set_fault_logs(self, to: Optional["DeviceState"]) -> None:
        """Record fault logs that appeared between this state and `to`."""
        if to is None:
            return
        for log in to.origin_logs:
            if log not in self.origin_logs:
                self.fault_logs.add(log)

    def get_possible_ui_events(self) -> List["UIEvent"]:
        from hap_explorer.event.event_builder import create_possible_ui_events

        return create_possible_ui_events(self.page.get_components())

    def to_json(self) -> Dict[str, Any]:
        return {
            "udid": self.udid,
            "width": self.width,
            "height": self.height,
            "page": self.page.to_json(),
            "screen": self.screen,
            "fault_logs": sorted(self.fault_logs),
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "DeviceState":
        state = cls(
            Page.from_json(data.get("page") or {}),
            udid=str(data.get("udid") or ""),
            width=int(data.get("width") or 0),
            height=int(data.get("height") or 0),
            screen=data.get("screen"),
        )
        state.fault_logs = set(data.get("fault_logs") or ())
        return state

    def __repr__(self) -> str:
        return f"DeviceState({self.page!r})"
