from __future__ import annotations

from enum import IntEnum


class KeyCode(IntEnum):
    # Values follow the OpenHarmony multimodal input key codes.
    KEYCODE_FN = 0
    KEYCODE_HOME = 1
    KEYCODE_BACK = 2
    KEYCODE_SEARCH = 9
    KEYCODE_VOLUME_UP = 16
    KEYCODE_VOLUME_DOWN = 17
    KEYCODE_POWER = 18
    KEYCODE_A = 2017
    KEYCODE_C = 2019
    KEYCODE_V = 2038
    KEYCODE_ENTER = 2054
    KEYCODE_DEL = 2055
    KEYCODE_CTRL_LEFT = 2072
