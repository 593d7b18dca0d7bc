from __future__ import annotations

from typing import Any, Dict

from hap_explorer.model.rank import Rank
from hap_explorer.model.signature import _json_dumps_canonical, event_page_digest


class Event:
    """Base class of every input the explorer can inject.

    Events are immutable after construction, except for `rank`. The rank is
    a scheduling hint and is not part of the serialized form.
    """

    event_type = "Event"

    def __init__(self, *, rank: int = Rank.NORMAL) -> None:
        self._rank = int(rank)

    @property
    def rank(self) -> int:
        return self._rank

    def set_rank(self, rank: int) -> None:
        self._rank = int(rank)

    def _fields_json(self) -> Dict[str, Any]:
        return {}

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": self.event_type}
        out.update(self._fields_json())
        return out

    def event_state_sig(self, state: Any) -> str:
        return event_page_digest(self.to_json(), state.page.get_content())

    def __str__(self) -> str:
        return _json_dumps_canonical(self.to_json())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._fields_json()!r})"
