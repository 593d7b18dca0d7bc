from __future__ import annotations

from typing import Any, Dict

from hap_explorer.event.event import Event


class WaitEvent(Event):
    """Tells the driver loop to poll again later.

    It is never dispatched to a device; see `hap_explorer.event.dispatch`.
    """

    event_type = "WaitEvent"

    def __init__(self, reason: str = "Waiting for async result") -> None:
        super().__init__()
        self.reason = reason

    def _fields_json(self) -> Dict[str, Any]:
        return {"reason": self.reason}

    def __str__(self) -> str:
        return f"WaitEvent: {self.reason}"
