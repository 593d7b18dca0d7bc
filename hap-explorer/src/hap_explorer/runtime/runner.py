from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, Optional, Union

from hap_explorer.config.options import FuzzOptions
from hap_explorer.event.event import Event
from hap_explorer.event.system_event import ExitEvent
from hap_explorer.event.wait_event import WaitEvent
from hap_explorer.logging_utils import resolve_logger
from hap_explorer.model.device_state import DeviceState
from hap_explorer.model.hap import Hap
from hap_explorer.policy.input_policy import InputPolicy
from hap_explorer.policy.llm_guided_policy import LlmGuidedPolicy
from hap_explorer.policy.policy_builder import build_policy
from hap_explorer.runtime.event_action import EventAction
from hap_explorer.runtime.tarpit import TarpitDetector

# Oracle-guided attempts per tarpit before backing out of it.
MAX_TRY_COUNT = 10


class RunnerManager:
    """Drives the policy -> device -> policy loop for one application."""

    def __init__(
        self,
        device: Any,
        hap: Hap,
        options: FuzzOptions,
        *,
        policy: Optional[InputPolicy] = None,
        llm_policy: Optional[LlmGuidedPolicy] = None,
        tarpit_detector: Optional[TarpitDetector] = None,
        output_dir: Optional[Union[str, Path]] = None,
        logger: Optional[logging.Logger] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.device = device
        self.hap = hap
        self.options = options
        self.logger = resolve_logger(logger, __name__)
        self.policy = policy if policy is not None else build_policy(device, hap, options, logger=logger)
        self.llm_policy = llm_policy
        self.tarpit_detector = tarpit_detector
        self.output_dir = Path(output_dir) if output_dir is not None else Path(device.get_output_dir())
        self.steps = 0
        self._sleep = sleep
        self._enabled = True
        self._tarpit_tries = 0

    @property
    def enabled(self) -> bool:
        return self._enabled

    def stop(self) -> None:
        self._enabled = False

    def start(self) -> int:
        """Run until the policy stops, `stop()` is called or `max_steps` events were sent.

        Returns the number of events sent to the device. `HapLaunchError`
        propagates to the caller.
        """
        self.logger.info("exploring %s with policy %s", self.hap.bundle_name, self.policy.name.value)
        state = self.device.get_current_state(self.hap)
        in_tarpit = False
        try:
            while self._enabled and self.policy.enabled:
                if self.options.max_steps and self.steps >= self.options.max_steps:
                    self.logger.info("step limit of %d reached", self.options.max_steps)
                    break

                event = self._select_event(state, in_tarpit)
                if isinstance(event, WaitEvent):
                    self.logger.debug("%s", event)
                    self._sleep(self.options.wait_poll_interval_s)
                    continue
                if isinstance(event, ExitEvent):
                    self.logger.info("exploration finished after %d step(s)", self.steps)
                    self.stop()
                    break

                prev_state = state
                state = self._add_event(state, event)
                in_tarpit = self._detect_tarpit(prev_state, state)
        finally:
            self._dump_utg()
            if self.llm_policy is not None:
                self.llm_policy.close()
        return self.steps

    def _select_event(self, state: DeviceState, in_tarpit: bool) -> Event:
        if self.llm_policy is None:
            return self.policy.generate_event(state)

        if in_tarpit:
            if self._tarpit_tries < MAX_TRY_COUNT:
                event = self.llm_policy.generate_event(state)
                if not isinstance(event, WaitEvent):
                    self._tarpit_tries += 1
                return event
            self._tarpit_tries = 0
            return self.llm_policy.get_back_event(state)

        self._tarpit_tries = 0
        self.llm_policy.clear_action_history()
        return self.policy.generate_event(state)

    def _detect_tarpit(self, prev_state: DeviceState, state: DeviceState) -> bool:
        if self.tarpit_detector is None or self.llm_policy is None:
            return False
        return self.tarpit_detector.is_tarpit(prev_state.screen, state.screen)

    def _add_event(self, state: DeviceState, event: Event) -> DeviceState:
        action = EventAction(self.device, self.hap, state, event, self.output_dir, logger=self.logger)
        action.start()
        self._sleep(self.options.event_interval_s)
        to_state = action.stop()
        self.steps += 1
        return to_state

    def _dump_utg(self) -> None:
        utg = getattr(self.policy, "utg", None)
        if utg is None:
            return
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / "utg.json"
        path.write_text(json.dumps(utg.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        self.logger.info("wrote %s", path)
