from __future__ import annotations

import logging
import random
from typing import Any, Optional

from hap_explorer.config.options import FuzzOptions
from hap_explorer.model.hap import Hap
from hap_explorer.policy.input_policy import InputPolicy, PolicyName
from hap_explorer.policy.llm_guided_policy import EventOracle, LlmGuidedPolicy
from hap_explorer.policy.replay_policy import ReplayPolicy
from hap_explorer.policy.scene_detect import SceneDetect
from hap_explorer.policy.utg_greedy_search_policy import UtgGreedySearchPolicy
from hap_explorer.policy.utg_input_policy import UtgInputPolicy
from hap_explorer.policy.utg_naive_search_policy import UtgNaiveSearchPolicy


def build_policy(
    device: Any,
    hap: Hap,
    options: FuzzOptions,
    *,
    logger: Optional[logging.Logger] = None,
) -> InputPolicy:
    name = PolicyName(options.policy_name)
    if name == PolicyName.REPLAY:
        if not options.report_root:
            raise ValueError("policy 'replay' requires report_root")
        return ReplayPolicy(device, hap, options.report_root, logger=logger)

    kwargs = {
        "random_input": options.random_input,
        "rng": random.Random(options.seed),
        "max_restarts": options.max_restarts,
        "scene_detect": SceneDetect(options.scene_models_dir, logger=logger),
        "logger": logger,
    }
    if name in (PolicyName.DFS_GREEDY, PolicyName.BFS_GREEDY):
        return UtgGreedySearchPolicy(device, hap, name, **kwargs)
    if name in (PolicyName.NAIVE, PolicyName.DFS_NAIVE, PolicyName.BFS_NAIVE):
        return UtgNaiveSearchPolicy(device, hap, name, **kwargs)
    raise ValueError(f"policy {name.value!r} cannot drive an exploration on its own")


def build_llm_policy(
    base_policy: InputPolicy,
    oracle: EventOracle,
    options: FuzzOptions,
    *,
    logger: Optional[logging.Logger] = None,
) -> LlmGuidedPolicy:
    if not isinstance(base_policy, UtgInputPolicy):
        raise ValueError(f"llm guidance needs a graph based policy, got {base_policy.name.value!r}")
    return LlmGuidedPolicy(
        base_policy,
        oracle,
        max_restarts=options.max_restarts,
        rng=random.Random(options.seed),
        logger=logger,
    )
