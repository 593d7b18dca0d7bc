from __future__ import annotations

import logging

import pytest

from hap_explorer.logging_utils import configure_logging, resolve_logger


def test_resolve_logger_prefers_injected_logger() -> None:
    injected = logging.getLogger("custom")
    assert resolve_logger(injected, "hap_explorer.policy") is injected
    assert resolve_logger(None, "hap_explorer.policy").name == "hap_explorer.policy"


def test_configure_logging_accepts_level_names(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: seen.update(kwargs))
    configure_logging(" debug ")
    assert seen["level"] == logging.DEBUG
    assert seen["format"] == "[%(levelname)s] %(name)s: %(message)s"
