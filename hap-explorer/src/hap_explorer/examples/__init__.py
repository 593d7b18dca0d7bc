"""Example / toy components for local development (not part of the core runtime)."""

from __future__ import annotations

from hap_explorer.examples.toy_device import ToyDevice, ToyScreen, build_toy_app

__all__ = [
    "ToyDevice",
    "ToyScreen",
    "build_toy_app",
]
