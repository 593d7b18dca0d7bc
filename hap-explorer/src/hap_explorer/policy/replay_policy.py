from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from hap_explorer.errors import ReplayLoadError
from hap_explorer.event.event import Event
from hap_explorer.event.event_builder import create_event_from_json
from hap_explorer.event.system_event import ExitEvent
from hap_explorer.model.device_state import DeviceState
from hap_explorer.model.hap import Hap
from hap_explorer.policy.input_policy import InputPolicy, PolicyName


def load_replay_steps(events_dir: Path) -> List[Tuple[DeviceState, Event]]:
    """Read persisted transition records back, in file name (= time) order."""
    if not events_dir.is_dir():
        raise ReplayLoadError(f"replay events dir not found: {events_dir}")
    steps: List[Tuple[DeviceState, Event]] = []
    for path in sorted(events_dir.glob("*.json")):
        try:
            record = json.loads(path.read_text(encoding="utf-8"))
            steps.append((DeviceState.from_json(record["state"]), create_event_from_json(record["event"])))
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise ReplayLoadError(f"invalid replay record {path}: {e}") from e
    return steps


class ReplayPolicy(InputPolicy):
    def __init__(
        self,
        device: Any,
        hap: Hap,
        report_root: Union[str, Path],
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(device, hap, PolicyName.REPLAY, logger=logger)
        self.report_root = Path(report_root)
        self.steps = load_replay_steps(self.report_root / "events")
        self.current_step = 0
        self.logger.info("loaded %d replay step(s) from %s", len(self.steps), self.report_root)

    def generate_event(self, state: DeviceState) -> Event:
        if self.current_step >= len(self.steps):
            self.stop()
            return ExitEvent()

        recorded, event = self.steps[self.current_step]
        self.current_step += 1
        if recorded.content_sig != state.content_sig:
            self.logger.warning(
                "replay step %d: state %s differs from recorded %s",
                self.current_step,
                state.content_sig[:12],
                recorded.content_sig[:12],
            )
        return event
