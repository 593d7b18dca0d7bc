from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum, IntFlag
from typing import Any, Optional, Union

from hap_explorer.event.event import Event
from hap_explorer.logging_utils import resolve_logger
from hap_explorer.model.device_state import DeviceState
from hap_explorer.model.hap import Hap


class PolicyFlag(IntFlag):
    INIT = 0
    START_APP = 1
    STOP_APP = 1 << 2
    STARTED = 1 << 3


class PolicyName(str, Enum):
    NAIVE = "naive"
    DFS_NAIVE = "dfs_naive"
    BFS_NAIVE = "bfs_naive"
    DFS_GREEDY = "greedy_dfs"
    BFS_GREEDY = "greedy_bfs"
    REPLAY = "replay"
    LLM = "llm"


class InputPolicy(ABC):
    """Turns the currently observed state into the next event to inject."""

    def __init__(
        self,
        device: Any,
        hap: Hap,
        name: Union[PolicyName, str],
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.device = device
        self.hap = hap
        self.name = PolicyName(name)
        self.flag = PolicyFlag.INIT
        self.logger = resolve_logger(logger, __name__)
        self._enabled = True

    @property
    def enabled(self) -> bool:
        return self._enabled

    def stop(self) -> None:
        self._enabled = False

    @abstractmethod
    def generate_event(self, state: DeviceState) -> Event:
        raise NotImplementedError
