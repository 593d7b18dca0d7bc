"""UI transition graph and the exploration strategies built on it."""

from __future__ import annotations

from hap_explorer.policy.input_policy import InputPolicy, PolicyFlag, PolicyName
from hap_explorer.policy.llm_guided_policy import EventOracle, LlmGuidedPolicy
from hap_explorer.policy.policy_builder import build_llm_policy, build_policy
from hap_explorer.policy.replay_policy import ReplayPolicy, load_replay_steps
from hap_explorer.policy.scene_detect import SceneDetect
from hap_explorer.policy.utg import UTG
from hap_explorer.policy.utg_greedy_search_policy import UtgGreedySearchPolicy
from hap_explorer.policy.utg_input_policy import MAX_NUM_RESTARTS, UtgInputPolicy
from hap_explorer.policy.utg_naive_search_policy import UtgNaiveSearchPolicy

__all__ = [
    "EventOracle",
    "InputPolicy",
    "LlmGuidedPolicy",
    "MAX_NUM_RESTARTS",
    "PolicyFlag",
    "PolicyName",
    "ReplayPolicy",
    "SceneDetect",
    "UTG",
    "UtgGreedySearchPolicy",
    "UtgInputPolicy",
    "UtgNaiveSearchPolicy",
    "build_llm_policy",
    "build_policy",
    "load_replay_steps",
]
