"""Interfaces of the device layer the explorer drives.

Nothing here talks to hardware; see `hap_explorer.examples.toy_device` for
an in-memory implementation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional, Protocol, Union, runtime_checkable

from hap_explorer.event.event import Event
from hap_explorer.model.device_state import DeviceState
from hap_explorer.model.hap import Hap, HapRunningState
from hap_explorer.model.key_code import KeyCode
from hap_explorer.model.point import Point


@runtime_checkable
class Device(Protocol):
    width: int
    height: int

    def get_current_state(self, hap: Hap) -> DeviceState: ...

    def send_event(self, event: Event) -> None: ...

    def get_running_state(self, hap: Hap) -> Optional[HapRunningState]: ...

    def get_output_dir(self) -> Union[str, Path]: ...


@runtime_checkable
class BundleListingDevice(Device, Protocol):
    def get_all_bundle_names(self) -> List[str]: ...


@runtime_checkable
class EventSimulator(Protocol):
    width: int
    height: int

    def click(self, point: Point) -> None: ...

    def long_click(self, point: Point) -> None: ...

    def double_click(self, point: Point) -> None: ...

    def input_text(self, point: Point, text: str) -> None: ...

    def fling(self, start: Point, end: Point, step: int, speed: int) -> None: ...

    def swipe(self, start: Point, end: Point, speed: int) -> None: ...

    def drag(self, start: Point, end: Point, speed: int) -> None: ...

    def input_key(self, code0: KeyCode, code1: Optional[KeyCode] = None, code2: Optional[KeyCode] = None) -> None: ...

    def start_ability(self, bundle_name: str, ability_name: str) -> None: ...

    def force_stop(self, bundle_name: str) -> None: ...

    def inject_gesture(self, gestures: List[Any], speed: int) -> None: ...
