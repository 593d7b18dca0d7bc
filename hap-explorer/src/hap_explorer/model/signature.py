"""Content and structural identity of UI states.

All digests are SHA-256 over a canonical JSON encoding (sorted keys, compact
separators), so they are stable within a session and across sessions. The
component tree is serialized with its children in a canonical order (see
`Component.to_json`) before it reaches these helpers.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Protocol


def _json_dumps_canonical(obj: Any) -> str:
    """Deterministic JSON encoding for hashing / stable digests."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def stable_sha256(obj: Any) -> str:
    """Compute a stable SHA-256 digest for arbitrary JSON-serializable objects."""
    if isinstance(obj, (bytes, bytearray)):
        data = bytes(obj)
    elif isinstance(obj, str):
        data = obj.encode("utf-8")
    else:
        data = _json_dumps_canonical(obj).encode("utf-8")
    return hashlib.sha256(data).hexdigest()


class _HasPage(Protocol):
    page: Any


class _SerializableEvent(Protocol):
    def to_json(self) -> dict: ...

    def event_state_sig(self, state: Any) -> str: ...


def content_sig(state: _HasPage) -> str:
    return state.page.content_sig


def structural_sig(state: _HasPage) -> str:
    return state.page.structural_sig


def event_sig(event: _SerializableEvent, state: _HasPage) -> str:
    """Dedup key for "this event was tried from this state"."""
    return event.event_state_sig(state)


def event_page_digest(event_json: dict, page_content: dict) -> str:
    return stable_sha256({"event": event_json, "page": page_content})
