from __future__ import annotations

from typing import Any, Dict, Optional, Union

from hap_explorer.event.event import Event
from hap_explorer.model.key_code import KeyCode


class KeyEvent(Event):
    event_type = "KeyEvent"

    def __init__(self, key_code: Union[KeyCode, int], *, rank: int = 0) -> None:
        super().__init__(rank=rank)
        self.key_code = KeyCode(key_code)

    def _fields_json(self) -> Dict[str, Any]:
        return {"key_code": int(self.key_code)}


class CombinedKeyEvent(KeyEvent):
    event_type = "CombinedKeyEvent"

    def __init__(
        self,
        code0: Union[KeyCode, int],
        code1: Union[KeyCode, int],
        code2: Optional[Union[KeyCode, int]] = None,
        *,
        rank: int = 0,
    ) -> None:
        super().__init__(code0, rank=rank)
        self.key_code1 = KeyCode(code1)
        self.key_code2 = KeyCode(code2) if code2 is not None else None

    def _fields_json(self) -> Dict[str, Any]:
        out = super()._fields_json()
        out["key_code1"] = int(self.key_code1)
        out["key_code2"] = int(self.key_code2) if self.key_code2 is not None else None
        return out


# Shared instances; never call set_rank() on these.
BACK_KEY_EVENT = KeyEvent(KeyCode.KEYCODE_BACK)
HOME_KEY_EVENT = KeyEvent(KeyCode.KEYCODE_HOME)
