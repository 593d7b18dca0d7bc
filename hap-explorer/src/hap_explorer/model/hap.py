from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class HapRunningState(Enum):
    STOP = "STOP"
    FOREGROUND = "FOREGROUND"
    BACKGROUND = "BACKGROUND"


def convert_str_to_running_state(state: str) -> Optional[HapRunningState]:
    try:
        return HapRunningState(str(state).strip().upper())
    except ValueError:
        return None


@dataclass
class Hap:
    """The application under exploration."""

    bundle_name: str
    main_ability: str
    version_code: int = 0
    abilities: List[str] = field(default_factory=list)
    hap_file: Optional[str] = None
