from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from hap_explorer.config.options import FuzzOptions
from hap_explorer.examples.toy_device import TOY_ABILITY, TOY_BUNDLE, ToyDevice
from hap_explorer.runtime.fuzz import ALL_BUNDLES, Fuzz, is_excluded


class _MultiBundleDevice(ToyDevice):
    def get_all_bundle_names(self) -> List[str]:
        return ["com.android.settings", TOY_BUNDLE, "com.vendor.camera"]


def test_is_excluded_uses_glob_patterns() -> None:
    assert is_excluded("com.android.settings", ["com.android.*"])
    assert not is_excluded("com.example.toy", ["com.android.*", "*.camera"])


def test_all_bundles_minus_excludes(tmp_path: Path) -> None:
    options = FuzzOptions(bundle_name=ALL_BUNDLES, excludes=["com.android.*"])
    fuzz = Fuzz(options, _MultiBundleDevice(output_dir=tmp_path))
    assert fuzz.bundle_names() == [TOY_BUNDLE, "com.vendor.camera"]

    single = Fuzz(FuzzOptions(bundle_name=TOY_BUNDLE), ToyDevice(output_dir=tmp_path))
    assert single.bundle_names() == [TOY_BUNDLE]


def test_all_bundles_get_their_own_output_dir(tmp_path: Path) -> None:
    options = FuzzOptions(
        bundle_name=ALL_BUNDLES,
        main_ability=TOY_ABILITY,
        policy_name="greedy_dfs",
        max_steps=8,
        event_interval_s=0,
    )
    fuzz = Fuzz(options, ToyDevice(output_dir=tmp_path), sleep=lambda s: None)
    assert fuzz.start() == 8
    assert (tmp_path / TOY_BUNDLE / "utg.json").is_file()
    assert len(list((tmp_path / TOY_BUNDLE / "events").glob("*.json"))) == 8


def test_llm_requires_oracle() -> None:
    with pytest.raises(ValueError):
        Fuzz(FuzzOptions(bundle_name=TOY_BUNDLE, llm=True), ToyDevice())
