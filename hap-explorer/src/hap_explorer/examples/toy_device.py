from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from hap_explorer.event.dispatch import send_event
from hap_explorer.event.event import Event
from hap_explorer.model.component import Component
from hap_explorer.model.device_state import DeviceState
from hap_explorer.model.hap import Hap, HapRunningState
from hap_explorer.model.key_code import KeyCode
from hap_explorer.model.page import BACKGROUND_PAGE, STOP_PAGE, Page
from hap_explorer.model.point import Point

TOY_BUNDLE = "com.example.toy"
TOY_ABILITY = "EntryAbility"


@dataclass
class ToyScreen:
    """One screen of a toy app; `links` maps a component key to the next screen."""

    page: Page
    links: Dict[str, str] = field(default_factory=dict)


def toy_button(key: str, bounds: List[int], *, text: str = "", type: str = "Button") -> Component:
    x1, y1, x2, y2 = bounds
    return Component(
        type=type,
        bounds=[Point(x1, y1), Point(x2, y2)],
        key=key,
        id=key,
        text=text or key,
        clickable=True,
    )


def toy_page(page_path: str, *children: Component, bundle_name: str = TOY_BUNDLE) -> Page:
    root = Component(type="root", bounds=[Point(0, 0), Point(1080, 1920)])
    for child in children:
        root.add_child(child)
    return Page(root, TOY_ABILITY, bundle_name, page_path)


def build_toy_app() -> Dict[str, ToyScreen]:
    """main -> detail / settings; settings opens a dialog that closes back to settings."""
    dialog = Component(type="Dialog", bounds=[Point(100, 600), Point(980, 1200)])
    dialog.add_child(toy_button("ok", [200, 1000, 500, 1100], text="OK"))
    dialog.add_child(toy_button("cancel", [580, 1000, 880, 1100], text="Cancel"))

    return {
        "main": ToyScreen(
            toy_page(
                "pages/Index",
                toy_button("detail", [0, 200, 1080, 400], text="Detail"),
                toy_button("settings", [0, 500, 1080, 700], text="Settings"),
            ),
            {"detail": "detail", "settings": "settings"},
        ),
        "detail": ToyScreen(
            toy_page("pages/Detail", toy_button("like", [0, 200, 540, 400], text="Like")),
            {"like": "detail_liked"},
        ),
        "detail_liked": ToyScreen(
            toy_page("pages/Detail", toy_button("like", [0, 200, 540, 400], text="Liked")),
        ),
        "settings": ToyScreen(
            toy_page("pages/Settings", toy_button("reset", [0, 200, 1080, 400], text="Reset")),
            {"reset": "settings_dialog"},
        ),
        "settings_dialog": ToyScreen(toy_page("pages/Settings", dialog), {"ok": "settings", "cancel": "settings"}),
    }


class ToyDevice:
    """An in-memory scripted device for local development and tests.

    It implements both the device and the event simulator interfaces. Taps on
    linked components move to the linked screen, BACK pops the screen stack
    (backgrounding the app at its root), and everything else is recorded but
    changes nothing.
    """

    def __init__(
        self,
        screens: Optional[Dict[str, ToyScreen]] = None,
        *,
        home: str = "main",
        bundle_name: str = TOY_BUNDLE,
        output_dir: Union[str, Path] = "out",
        width: int = 1080,
        height: int = 1920,
        launchable: bool = True,
    ) -> None:
        self.screens = screens if screens is not None else build_toy_app()
        self.home = home
        self.bundle_name = bundle_name
        self.output_dir = Path(output_dir)
        self.width = width
        self.height = height
        self.launchable = launchable

        self.current: Optional[str] = None
        self.background = False
        self.stack: List[str] = []
        self.sent: List[Event] = []
        self.calls: List[tuple] = []

    # -- device ----------------------------------------------------------------

    def get_current_state(self, hap: Hap) -> DeviceState:
        if self.current is None:
            page = STOP_PAGE
        elif self.background:
            page = BACKGROUND_PAGE
        else:
            page = self.screens[self.current].page
        screen = f"{self.current or 'stop'}.png"
        return DeviceState(page, udid="toy", width=self.width, height=self.height, screen=screen)

    def send_event(self, event: Event) -> None:
        self.sent.append(event)
        send_event(event, self)

    def get_running_state(self, hap: Hap) -> Optional[HapRunningState]:
        if self.current is None:
            return HapRunningState.STOP
        return HapRunningState.BACKGROUND if self.background else HapRunningState.FOREGROUND

    def get_output_dir(self) -> Path:
        return self.output_dir

    def get_all_bundle_names(self) -> List[str]:
        return [self.bundle_name]

    # -- simulator -------------------------------------------------------------

    def _component_at(self, point: Point) -> Optional[Component]:
        if self.current is None or self.background:
            return None
        hit = None
        for c in self.screens[self.current].page.get_components():
            (x1, y1), (x2, y2) = ((p.x, p.y) for p in c.bounds)
            if c.clickable and x1 <= point.x <= x2 and y1 <= point.y <= y2:
                hit = c
        return hit

    def click(self, point: Point) -> None:
        self.calls.append(("click", point))
        component = self._component_at(point)
        if component is None:
            return
        target = self.screens[self.current].links.get(component.key)
        if target is not None:
            self.stack.append(self.current)
            self.current = target

    def long_click(self, point: Point) -> None:
        self.calls.append(("long_click", point))

    def double_click(self, point: Point) -> None:
        self.calls.append(("double_click", point))

    def input_text(self, point: Point, text: str) -> None:
        self.calls.append(("input_text", point, text))

    def fling(self, start: Point, end: Point, step: int, speed: int) -> None:
        self.calls.append(("fling", start, end, step, speed))

    def swipe(self, start: Point, end: Point, speed: int) -> None:
        self.calls.append(("swipe", start, end, speed))

    def drag(self, start: Point, end: Point, speed: int) -> None:
        self.calls.append(("drag", start, end, speed))

    def input_key(self, code0: KeyCode, code1: Optional[KeyCode] = None, code2: Optional[KeyCode] = None) -> None:
        self.calls.append(("input_key", code0, code1, code2))
        if code1 is not None or self.current is None or self.background:
            return
        if code0 == KeyCode.KEYCODE_BACK:
            if self.stack:
                self.current = self.stack.pop()
            else:
                self.background = True
        elif code0 == KeyCode.KEYCODE_HOME:
            self.background = True

    def start_ability(self, bundle_name: str, ability_name: str) -> None:
        self.calls.append(("start_ability", bundle_name, ability_name))
        if not self.launchable or bundle_name != self.bundle_name:
            return
        if self.current is not None and self.background:
            self.background = False
            return
        self.current = self.home
        self.background = False
        self.stack = []

    def force_stop(self, bundle_name: str) -> None:
        self.calls.append(("force_stop", bundle_name))
        if bundle_name == self.bundle_name:
            self.current = None
            self.background = False
            self.stack = []

    def inject_gesture(self, gestures: List[Any], speed: int) -> None:
        self.calls.append(("inject_gesture", len(gestures), speed))
