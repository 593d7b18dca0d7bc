from __future__ import annotations

from hap_explorer.config.options import (
    FUZZ_OPTIONS_SCHEMA,
    FuzzOptions,
    load_fuzz_options,
    read_options_file,
    validate_options,
)

__all__ = [
    "FUZZ_OPTIONS_SCHEMA",
    "FuzzOptions",
    "load_fuzz_options",
    "read_options_file",
    "validate_options",
]
