from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol, runtime_checkable

from hap_explorer.logging_utils import resolve_logger

DEFAULT_THRESHOLD = 0.9


@runtime_checkable
class TarpitDetector(Protocol):
    def is_tarpit(self, prev_screen: Optional[str], cur_screen: Optional[str]) -> bool: ...


class SimilarityTarpitDetector:
    """Reports a tarpit after `sim_k` consecutive near-identical screenshots.

    `similarity(a, b)` scores two screenshot paths in [0, 1].
    """

    def __init__(
        self,
        similarity: Callable[[str, str], float],
        sim_k: int = 3,
        threshold: float = DEFAULT_THRESHOLD,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.similarity = similarity
        self.sim_k = int(sim_k)
        self.threshold = float(threshold)
        self.sim_count = 0
        self.logger = resolve_logger(logger, __name__)

    def reset(self) -> None:
        self.sim_count = 0

    def is_tarpit(self, prev_screen: Optional[str], cur_screen: Optional[str]) -> bool:
        if not prev_screen or not cur_screen:
            self.sim_count = 0
            return False
        score = float(self.similarity(prev_screen, cur_screen))
        if score >= self.threshold:
            self.sim_count += 1
        else:
            self.sim_count = 0
        self.logger.debug("similarity %.3f, sim_count %d", score, self.sim_count)
        return self.sim_count >= self.sim_k
