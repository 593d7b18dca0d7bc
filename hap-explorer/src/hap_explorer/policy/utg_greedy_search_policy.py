from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Set, Tuple, Union

from hap_explorer.event.event import Event
from hap_explorer.event.event_builder import create_possible_ui_events
from hap_explorer.event.key_event import BACK_KEY_EVENT
from hap_explorer.event.ui_event import InputTextEvent
from hap_explorer.model.component import Component
from hap_explorer.model.device_state import DeviceState
from hap_explorer.model.hap import Hap
from hap_explorer.policy.input_policy import PolicyName
from hap_explorer.policy.scene_detect import SceneDetect
from hap_explorer.policy.utg_input_policy import MAX_NUM_RESTARTS, UtgInputPolicy


def _action_count(component: Optional[Component]) -> int:
    if component is None:
        return 0
    return sum(
        (
            component.checkable or component.clickable,
            component.long_clickable,
            component.scrollable,
            component.inputable,
        )
    )


def _rank_and_actions(event: Event) -> Tuple[int, int]:
    return event.rank, _action_count(getattr(event, "component", None))


class UtgGreedySearchPolicy(UtgInputPolicy):
    """DFS or BFS over pages, steered by where BACK sits in the candidate list.

    On the first visit of a page key BACK goes first (`greedy_bfs`) or last
    (`greedy_dfs`); afterwards it is only a last resort.
    """

    def __init__(
        self,
        device: Any,
        hap: Hap,
        name: Union[PolicyName, str] = PolicyName.DFS_GREEDY,
        *,
        random_input: bool = True,
        rng: Optional[random.Random] = None,
        max_restarts: int = MAX_NUM_RESTARTS,
        scene_detect: Optional[SceneDetect] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(
            device,
            hap,
            name,
            random_input=random_input,
            rng=rng,
            max_restarts=max_restarts,
            scene_detect=scene_detect,
            logger=logger,
        )
        if self.name not in (PolicyName.DFS_GREEDY, PolicyName.BFS_GREEDY):
            raise ValueError(f"not a greedy policy name: {self.name.value}")
        self._ranked_components: Dict[str, List[Component]] = {}
        self._input_tried: Set[Tuple[str, Optional[str]]] = set()

    def get_ranked_components(self, state: DeviceState) -> List[Component]:
        sig = state.content_sig
        ranked = self._ranked_components.get(sig)
        if ranked is None:
            components = [c for c in self.get_components(state) if c.enabled]
            ranked = sorted(components, key=lambda c: (c.rank, _action_count(c)), reverse=True)
            self._ranked_components[sig] = ranked
        return ranked

    def get_candidate_events(self, state: DeviceState) -> List[Event]:
        page_key = state.get_page_key()
        events: List[Event] = []
        for event in create_possible_ui_events(self.get_ranked_components(state)):
            if isinstance(event, InputTextEvent) and (page_key, event.get_component_id()) in self._input_tried:
                # One text per field; the rest must not keep the state unexplored.
                if not self.utg.is_event_explored(event, state):
                    self.utg.skip_event(event, state)
                continue
            events.append(event)
        events = self._select_by_rank(events, key=_rank_and_actions)

        if self.entered_new_page and self.name == PolicyName.BFS_GREEDY:
            events.insert(0, BACK_KEY_EVENT)
        else:
            events.append(BACK_KEY_EVENT)
        return events

    def generate_event_based_on_strategy(self, state: DeviceState) -> Optional[Event]:
        event = self._select_or_fall_back(state, self.get_candidate_events(state))
        if isinstance(event, InputTextEvent):
            self._input_tried.add((state.get_page_key(), event.get_component_id()))
        return event
