from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from hap_explorer.event.event import Event
from hap_explorer.logging_utils import resolve_logger
from hap_explorer.model.device_state import DeviceState
from hap_explorer.model.hap import Hap
from hap_explorer.model.signature import event_sig


def _timestamp(now: datetime) -> str:
    return now.strftime("%Y-%m-%d-%H-%M-%S-") + f"{now.microsecond // 1000:03d}"


class EventAction:
    """Sends one event and persists the resulting transition for replay.

    Records land in ``<output_dir>/events/event_<YYYY-MM-DD-HH-mm-ss-SSS>.json``.
    """

    def __init__(
        self,
        device: Any,
        hap: Hap,
        state: DeviceState,
        event: Event,
        output_dir: Union[str, Path],
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.device = device
        self.hap = hap
        self.from_state = state
        self.event = event
        self.to_state: Optional[DeviceState] = None
        self.event_state: Optional[str] = None
        self.events_dir = Path(output_dir) / "events"
        self.logger = resolve_logger(logger, __name__)
        self.path: Optional[Path] = None

    def start(self) -> None:
        self.logger.info("EventAction->start: %s", self.event)
        self.event_state = event_sig(self.event, self.from_state)
        self.device.send_event(self.event)

    def stop(self) -> DeviceState:
        self.to_state = self.device.get_current_state(self.hap)
        self.from_state.set_fault_logs(self.to_state)
        if self.from_state.fault_logs:
            self.logger.warning("new fault logs after %s: %s", self.event, sorted(self.from_state.fault_logs))
        self.path = self.save()
        return self.to_state

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.event.to_json(),
            "state": self.from_state.to_json(),
            "from_state": self.from_state.content_sig,
            "to_state": self.to_state.content_sig if self.to_state is not None else None,
            "event_state": self.event_state,
        }

    def save(self) -> Path:
        self.events_dir.mkdir(parents=True, exist_ok=True)
        stem = f"event_{_timestamp(datetime.now())}"
        path = self.events_dir / f"{stem}.json"
        n = 1
        while path.exists():
            # Same millisecond; the suffix keeps file name order = dispatch order.
            path = self.events_dir / f"{stem}_{n:03d}.json"
            n += 1
        path.write_text(json.dumps(self.to_dict(), indent=4, ensure_ascii=False), encoding="utf-8")
        return path
