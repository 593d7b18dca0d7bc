from __future__ import annotations

from hap_explorer.runtime.device import BundleListingDevice, Device, EventSimulator
from hap_explorer.runtime.event_action import EventAction
from hap_explorer.runtime.fuzz import ALL_BUNDLES, Fuzz, is_excluded
from hap_explorer.runtime.runner import MAX_TRY_COUNT, RunnerManager
from hap_explorer.runtime.tarpit import SimilarityTarpitDetector, TarpitDetector

__all__ = [
    "ALL_BUNDLES",
    "BundleListingDevice",
    "Device",
    "EventAction",
    "EventSimulator",
    "Fuzz",
    "MAX_TRY_COUNT",
    "RunnerManager",
    "SimilarityTarpitDetector",
    "TarpitDetector",
    "is_excluded",
]
