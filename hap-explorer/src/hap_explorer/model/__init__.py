"""UI model: components, pages, device states and their signatures."""

from __future__ import annotations

from hap_explorer.model.component import Component, ComponentType
from hap_explorer.model.device_state import DeviceState
from hap_explorer.model.hap import Hap, HapRunningState
from hap_explorer.model.key_code import KeyCode
from hap_explorer.model.page import BACKGROUND_PAGE, STOP_PAGE, Page
from hap_explorer.model.point import Point
from hap_explorer.model.rank import Rank
from hap_explorer.model.signature import content_sig, event_sig, stable_sha256, structural_sig

__all__ = [
    "BACKGROUND_PAGE",
    "Component",
    "ComponentType",
    "DeviceState",
    "Hap",
    "HapRunningState",
    "KeyCode",
    "Page",
    "Point",
    "Rank",
    "STOP_PAGE",
    "content_sig",
    "event_sig",
    "stable_sha256",
    "structural_sig",
]
