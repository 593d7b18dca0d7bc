from __future__ import annotations

from enum import IntEnum


class Rank(IntEnum):
    """Tie-break priority of an event; higher ranks are tried first."""

    LOW = -1
    NORMAL = 0
    HIGH = 1
    URGENT = 2
