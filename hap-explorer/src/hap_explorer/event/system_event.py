from __future__ import annotations

from typing import Any, Dict

from hap_explorer.event.event import Event
from hap_explorer.model.signature import stable_sha256


class SystemEvent(Event):
    pass


class AbilityEvent(SystemEvent):
    """Start `ability_name` of `bundle_name`."""

    event_type = "AbilityEvent"

    def __init__(self, bundle_name: str, ability_name: str) -> None:
        super().__init__()
        self.bundle_name = bundle_name
        self.ability_name = ability_name

    def _fields_json(self) -> Dict[str, Any]:
        return {"bundle_name": self.bundle_name, "ability_name": self.ability_name}

    def event_state_sig(self, state: Any) -> str:
        return stable_sha256(self.to_json())


class StopHapEvent(SystemEvent):
    """Force-stop the application."""

    event_type = "StopHapEvent"

    def __init__(self, bundle_name: str) -> None:
        super().__init__()
        self.bundle_name = bundle_name

    def _fields_json(self) -> Dict[str, Any]:
        return {"bundle_name": self.bundle_name}

    def event_state_sig(self, state: Any) -> str:
        return stable_sha256(self.to_json())


class ExitEvent(SystemEvent):
    """Ends the exploration session; sending it does nothing."""

    event_type = "ExitEvent"
