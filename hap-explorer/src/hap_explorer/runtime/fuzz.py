from __future__ import annotations

import fnmatch
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional

from hap_explorer.config.options import FuzzOptions
from hap_explorer.logging_utils import resolve_logger
from hap_explorer.model.hap import Hap
from hap_explorer.policy.llm_guided_policy import EventOracle
from hap_explorer.policy.policy_builder import build_llm_policy, build_policy
from hap_explorer.runtime.runner import RunnerManager
from hap_explorer.runtime.tarpit import SimilarityTarpitDetector

ALL_BUNDLES = "ALL"


def is_excluded(bundle_name: str, patterns: List[str]) -> bool:
    return any(fnmatch.fnmatchcase(bundle_name, p) for p in patterns)


class Fuzz:
    """Entrance: explores one bundle, or every bundle on the device."""

    def __init__(
        self,
        options: FuzzOptions,
        device: Any,
        *,
        oracle: Optional[EventOracle] = None,
        similarity: Optional[Callable[[str, str], float]] = None,
        hap_factory: Optional[Callable[[str], Hap]] = None,
        logger: Optional[logging.Logger] = None,
        **runner_kwargs: Any,
    ) -> None:
        if options.llm and oracle is None:
            raise ValueError("llm guidance is enabled but no oracle was given")
        self.options = options
        self.device = device
        self.oracle = oracle
        self.similarity = similarity
        self.hap_factory = hap_factory or (lambda name: Hap(name, options.main_ability))
        self.logger = resolve_logger(logger, __name__)
        self.runner_kwargs = runner_kwargs

    def bundle_names(self) -> List[str]:
        if self.options.bundle_name != ALL_BUNDLES:
            return [self.options.bundle_name]
        names = []
        for name in self.device.get_all_bundle_names():
            if is_excluded(name, self.options.excludes):
                self.logger.info("skipping excluded bundle %s", name)
                continue
            names.append(name)
        return names

    def start(self) -> int:
        total = 0
        all_bundles = self.options.bundle_name == ALL_BUNDLES
        for name in self.bundle_names():
            output_dir = Path(self.device.get_output_dir())
            if all_bundles:
                output_dir = output_dir / name
            total += self.start_one_bundle(name, output_dir)
        return total

    def start_one_bundle(self, bundle_name: str, output_dir: Path) -> int:
        hap = self.hap_factory(bundle_name)
        policy = build_policy(self.device, hap, self.options, logger=self.logger)

        llm_policy = None
        detector = None
        if self.options.llm:
            llm_policy = build_llm_policy(policy, self.oracle, self.options, logger=self.logger)
            if self.similarity is not None:
                detector = SimilarityTarpitDetector(self.similarity, self.options.sim_k, logger=self.logger)

        manager = RunnerManager(
            self.device,
            hap,
            self.options,
            policy=policy,
            llm_policy=llm_policy,
            tarpit_detector=detector,
            output_dir=output_dir,
            logger=self.logger,
            **self.runner_kwargs,
        )
        return manager.start()
