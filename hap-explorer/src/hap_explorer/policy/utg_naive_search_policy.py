from __future__ import annotations

import logging
import random
from typing import Any, List, Optional, Union

from hap_explorer.event.event import Event
from hap_explorer.event.event_builder import create_possible_ui_events
from hap_explorer.event.key_event import KeyEvent
from hap_explorer.model.device_state import DeviceState
from hap_explorer.model.hap import Hap
from hap_explorer.model.key_code import KeyCode
from hap_explorer.model.rank import Rank
from hap_explorer.policy.input_policy import PolicyName
from hap_explorer.policy.scene_detect import SceneDetect
from hap_explorer.policy.utg_input_policy import MAX_NUM_RESTARTS, UtgInputPolicy


class UtgNaiveSearchPolicy(UtgInputPolicy):
    """Tries the highest ranked unexplored event of the current state.

    BACK is always a candidate: last resort for `naive`/`dfs_naive`, first
    choice for `bfs_naive`.
    """

    def __init__(
        self,
        device: Any,
        hap: Hap,
        name: Union[PolicyName, str] = PolicyName.NAIVE,
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
        back_rank = Rank.URGENT if self.name == PolicyName.BFS_NAIVE else Rank.LOW
        self._back_event = KeyEvent(KeyCode.KEYCODE_BACK, rank=back_rank)

    def get_candidate_events(self, state: DeviceState) -> List[Event]:
        events: List[Event] = list(create_possible_ui_events(self.get_components(state)))
        events.append(self._back_event)
        return self._select_by_rank(events)

    def generate_event_based_on_strategy(self, state: DeviceState) -> Optional[Event]:
        return self._select_or_fall_back(state, self.get_candidate_events(state))
