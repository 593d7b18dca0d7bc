from __future__ import annotations

import logging
import random
from abc import abstractmethod
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Union

from hap_explorer.errors import HapLaunchError
from hap_explorer.event.event import Event
from hap_explorer.event.event_builder import create_random_touch_event
from hap_explorer.event.key_event import BACK_KEY_EVENT
from hap_explorer.event.system_event import AbilityEvent, ExitEvent, StopHapEvent
from hap_explorer.event.wait_event import WaitEvent
from hap_explorer.model.component import Component
from hap_explorer.model.device_state import DeviceState
from hap_explorer.model.hap import Hap, HapRunningState
from hap_explorer.model.rank import Rank
from hap_explorer.model.signature import event_sig
from hap_explorer.policy.input_policy import InputPolicy, PolicyFlag, PolicyName
from hap_explorer.policy.scene_detect import SceneDetect
from hap_explorer.policy.utg import UTG

MAX_NUM_RESTARTS = 5
# Navigation steps in a row without trying a new event before forcing a restart.
MAX_NAVIGATION_STEPS = 20


class UtgInputPolicy(InputPolicy):
    """Lifecycle state machine shared by every graph-backed strategy.

    Each call first records the transition produced by the previously
    returned event, then decides between stopping, launching, backing out,
    and asking the strategy for an event.
    """

    def __init__(
        self,
        device: Any,
        hap: Hap,
        name: Union[PolicyName, str],
        *,
        random_input: bool = True,
        rng: Optional[random.Random] = None,
        max_restarts: int = MAX_NUM_RESTARTS,
        scene_detect: Optional[SceneDetect] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(device, hap, name, logger=logger)
        self.random_input = random_input
        self.rng = rng or random.Random()
        self.max_restarts = int(max_restarts)
        self.scene_detect = scene_detect
        self.utg = UTG(hap, random_input=random_input, rng=self.rng, logger=self.logger)

        self.retry_count = 0
        self.exhaust_count = 0
        self.restart_count = 0
        self.navigate_count = 0

        self.current_state: Optional[DeviceState] = None
        self.last_state: Optional[DeviceState] = None
        self.last_event: Optional[Event] = None

        # page key -> content sigs of the in-bundle states showing that page
        self.page_state_map: Dict[str, Set[str]] = {}
        self.state_map: Dict[str, DeviceState] = {}
        self.state_component_map: Dict[str, List[Component]] = {}
        self.missed_states: Dict[str, DeviceState] = {}
        self.entered_new_page = False

        self._want: Optional[Tuple[str, str, DeviceState]] = None

    # -- transition bookkeeping ------------------------------------------------

    def note_event(self, state: DeviceState, event: Event) -> None:
        """Remember `event` as dispatched from `state`; recorded on the next update."""
        if isinstance(event, WaitEvent):
            return
        self.last_state = state
        self.last_event = event

    def update_utg(self, state: DeviceState) -> None:
        self.missed_states.pop(state.content_sig, None)
        if self.last_state is None or self.last_event is None:
            return
        from_state, event = self.last_state, self.last_event
        self.last_state = None
        self.last_event = None

        self.utg.add_transition(event, from_state, state)
        self.utg.add_transition_to_stop(state)
        self._check_want_transition(from_state, event, state)

    def want_transition(self, from_state: DeviceState, event: Event, expected: DeviceState) -> None:
        self._want = (from_state.content_sig, event_sig(event, from_state), expected)

    def _check_want_transition(self, from_state: DeviceState, event: Event, to_state: DeviceState) -> None:
        if self._want is None:
            return
        want_from, want_event, expected = self._want
        self._want = None
        if want_from != from_state.content_sig or want_event != event_sig(event, from_state):
            return
        if to_state.content_sig == expected.content_sig:
            return
        self.logger.info(
            "navigation missed %s, got %s; dropping edge", expected.content_sig[:12], to_state.content_sig[:12]
        )
        self.utg.remove_transition(event, from_state, expected)
        self.missed_states[expected.content_sig] = expected

    # -- lifecycle -------------------------------------------------------------

    def generate_event(self, state: DeviceState) -> Event:
        self.current_state = state
        self.update_utg(state)
        event = self._generate_lifecycle_event(state)
        self.note_event(state, event)
        return event

    def _running_state(self, state: DeviceState) -> Optional[HapRunningState]:
        if state.is_stop():
            return HapRunningState.STOP
        if state.page.bundle_name == self.hap.bundle_name:
            return HapRunningState.FOREGROUND
        if state.is_background():
            return HapRunningState.BACKGROUND
        return self.device.get_running_state(self.hap)

    def _generate_lifecycle_event(self, state: DeviceState) -> Event:
        running = self._running_state(state)

        if self.flag == PolicyFlag.INIT and running != HapRunningState.STOP:
            self.flag |= PolicyFlag.STOP_APP
            return StopHapEvent(self.hap.bundle_name)

        if running == HapRunningState.STOP:
            if self.retry_count >= self.max_restarts:
                self.logger.error("The number of HAP launch attempts exceeds %d", self.max_restarts)
                raise HapLaunchError(f"{self.hap.bundle_name} cannot be started")
            self.retry_count += 1
            self.flag |= PolicyFlag.START_APP
            return AbilityEvent(self.hap.bundle_name, self.hap.main_ability)

        if running != HapRunningState.FOREGROUND:
            if self.retry_count >= self.max_restarts:
                self.logger.info("app stuck in background, forcing a restart")
                self.flag |= PolicyFlag.STOP_APP
                self.retry_count = 0
                return StopHapEvent(self.hap.bundle_name)
            self.retry_count += 1
            return BACK_KEY_EVENT

        self.retry_count = 0
        self.flag = PolicyFlag.STARTED
        self._update_state(state)

        event: Optional[Event] = None
        if self.scene_detect is not None:
            event = self.scene_detect.generate_event_based_on_model(state.page)
        if event is None:
            event = self.generate_event_based_on_strategy(state)

        if event is None:
            if self.exhaust_count >= self.max_restarts:
                self.logger.info("no unexplored event left, stopping")
                self.stop()
                return ExitEvent()
            self.exhaust_count += 1
            return create_random_touch_event(self.device.width, self.device.height, self.rng)

        self.exhaust_count = 0
        return event

    # -- strategy support --------------------------------------------------------

    def _update_state(self, state: DeviceState) -> None:
        if state.page.bundle_name != self.hap.bundle_name:
            self.entered_new_page = False
            return

        key = state.get_page_key()
        self.entered_new_page = key not in self.page_state_map
        sigs = self.page_state_map.setdefault(key, set())
        sig = state.content_sig
        if sig in sigs:
            return
        sigs.add(sig)
        self.state_map[sig] = state
        self._update_preferable_component_rank(state)
        self.state_component_map[sig] = [c for c in state.page.get_components() if c.has_ui_event()]

    @staticmethod
    def _update_preferable_component_rank(state: DeviceState) -> None:
        # Dialogs must be handled before the page underneath.
        for dialog in state.page.get_dialogs():
            for item in dialog.walk():
                if item.has_ui_event():
                    item.rank = Rank.HIGH

    def get_components(self, state: DeviceState) -> List[Component]:
        components = self.state_component_map.get(state.content_sig)
        if components is None:
            self._update_preferable_component_rank(state)
            components = [c for c in state.page.get_components() if c.has_ui_event()]
        return components

    def _select_by_rank(self, events: List[Event], key: Optional[Callable[[Event], Any]] = None) -> List[Event]:
        ordered = list(events)
        if self.random_input:
            self.rng.shuffle(ordered)
        ordered.sort(key=key or (lambda e: e.rank), reverse=True)
        return ordered

    def _navigate_to_unexplored(self, state: DeviceState) -> Optional[Event]:
        for target in self.utg.iter_states_by_distance(state):
            if target.content_sig in self.missed_states:
                continue
            if target.page.bundle_name != self.hap.bundle_name:
                continue
            if self.utg.is_state_explored(target):
                continue
            steps = self.utg.get_navigation_steps(state, target)
            if not steps:
                continue
            event = steps[0][1]
            expected = steps[1][0] if len(steps) > 1 else target
            self.want_transition(state, event, expected)
            self.logger.info("navigating towards %s", target.content_sig[:12])
            return event
        return None

    def _is_page_explored(self, page_key: str) -> bool:
        return all(self.utg.is_state_explored(self.state_map[sig]) for sig in self.page_state_map[page_key])

    def _all_pages_explored(self) -> bool:
        return all(self._is_page_explored(key) for key in self.page_state_map)

    def _force_restart(self) -> Optional[Event]:
        if self.restart_count >= self.max_restarts:
            return None
        self.restart_count += 1
        self.navigate_count = 0
        self.logger.info("forcing restart %d/%d", self.restart_count, self.max_restarts)
        return StopHapEvent(self.hap.bundle_name)

    def _select_or_fall_back(self, state: DeviceState, candidates: List[Event]) -> Optional[Event]:
        """First unexplored candidate, else navigation, else a forced restart."""
        for event in candidates:
            if not self.utg.is_event_explored(event, state):
                self.restart_count = 0
                self.navigate_count = 0
                return event

        if self.navigate_count < MAX_NAVIGATION_STEPS:
            event = self._navigate_to_unexplored(state)
            if event is not None:
                self.navigate_count += 1
                return event
        else:
            self.logger.info("no new event after %d navigation steps", self.navigate_count)
        if not self._all_pages_explored():
            return self._force_restart()
        return None

    @abstractmethod
    def generate_event_based_on_strategy(self, state: DeviceState) -> Optional[Event]:
        raise NotImplementedError
