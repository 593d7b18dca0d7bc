from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from jsonschema import Draft202012Validator

from hap_explorer.errors import ConfigValidationError

POLICY_NAMES = ["naive", "dfs_naive", "bfs_naive", "greedy_dfs", "greedy_bfs", "replay"]

FUZZ_OPTIONS_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "required": ["bundle_name"],
    "properties": {
        "bundle_name": {"type": "string", "minLength": 1},
        "main_ability": {"type": "string"},
        "policy_name": {"enum": POLICY_NAMES},
        "output": {"type": "string", "minLength": 1},
        "random_input": {"type": "boolean"},
        "seed": {"type": "integer"},
        "max_restarts": {"type": "integer", "minimum": 0},
        "max_steps": {"type": "integer", "minimum": 0},
        "event_interval_s": {"type": "number", "minimum": 0},
        "wait_poll_interval_s": {"type": "number", "exclusiveMinimum": 0},
        "llm": {"type": "boolean"},
        "sim_k": {"type": "integer", "minimum": 1},
        "excludes": {"type": "array", "items": {"type": "string"}},
        "report_root": {"type": ["string", "null"]},
        "scene_models_dir": {"type": ["string", "null"]},
    },
    "allOf": [
        {
            "if": {"properties": {"policy_name": {"const": "replay"}}, "required": ["policy_name"]},
            "then": {"required": ["report_root"], "properties": {"report_root": {"type": "string"}}},
        }
    ],
}


@dataclass
class FuzzOptions:
    bundle_name: str
    main_ability: str = ""
    policy_name: str = "naive"
    output: str = "out"
    random_input: bool = True
    seed: int = 0
    max_restarts: int = 5
    max_steps: int = 0
    event_interval_s: float = 1.0
    wait_poll_interval_s: float = 1.5
    llm: bool = False
    sim_k: int = 3
    excludes: List[str] = field(default_factory=list)
    report_root: Optional[str] = None
    scene_models_dir: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], *, where: str = "options") -> "FuzzOptions":
        validate_options(data, where=where)
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


MAX_REPORTED_ERRORS = 20

_OPTION_READERS = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.loads,
}


def read_options_file(path: Path) -> Dict[str, Any]:
    """Read raw options from a YAML or JSON file.

    An empty file reads as ``{}`` so that the schema reports what is missing.
    """
    reader = _OPTION_READERS.get(path.suffix.lower())
    if reader is None:
        raise ValueError(f"options file must be .yaml, .yml or .json: {path}")
    if not path.exists():
        raise FileNotFoundError(path)

    data = reader(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigValidationError(f"{path}: options must be a mapping of option names, got {type(data).__name__}")
    return data


def _option_errors(instance: Dict[str, Any]) -> List[Tuple[str, str]]:
    found: List[Tuple[str, str]] = []
    for e in Draft202012Validator(FUZZ_OPTIONS_SCHEMA).iter_errors(instance):
        option = str(e.path[0]) if e.path else ""
        found.append((option, e.message))

    # Cross-option rules the schema does not express.
    if instance.get("llm") is True and instance.get("policy_name") == "replay":
        found.append(("llm", "llm guidance cannot be combined with policy 'replay'"))
    return sorted(found)


def validate_options(instance: Dict[str, Any], *, where: str) -> None:
    errors = _option_errors(instance)
    if not errors:
        return
    lines = [
        f"- {where}: option {option!r}: {message}" if option else f"- {where}: {message}"
        for option, message in errors[:MAX_REPORTED_ERRORS]
    ]
    if len(errors) > MAX_REPORTED_ERRORS:
        lines.append(f"... ({len(errors) - MAX_REPORTED_ERRORS} more)")
    raise ConfigValidationError("invalid fuzz options:\n" + "\n".join(lines))


def load_fuzz_options(path: Union[str, Path]) -> FuzzOptions:
    path = Path(path)
    return FuzzOptions.from_dict(read_options_file(path), where=str(path))
