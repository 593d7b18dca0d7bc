"""UI transition graph.

Two directed graphs are maintained side by side: one keyed by the content
signature of states and one keyed by their structural signature. Every edge
carries an ``events`` map from event signature to ``{"event", "id"}``; parallel
events between the same pair of states share one edge.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

import networkx as nx

from hap_explorer.event.event import Event
from hap_explorer.event.system_event import StopHapEvent
from hap_explorer.logging_utils import resolve_logger
from hap_explorer.model.device_state import DeviceState
from hap_explorer.model.hap import Hap
from hap_explorer.model.signature import event_sig

Transition = Tuple[DeviceState, Event, DeviceState]
NavigationStep = Tuple[DeviceState, Event]


class UTG:
    def __init__(
        self,
        hap: Hap,
        *,
        random_input: bool = True,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.hap = hap
        self.random_input = random_input
        self.rng = rng or random.Random()
        self.logger = resolve_logger(logger, __name__)

        self.content_graph = nx.DiGraph()
        self.structural_graph = nx.DiGraph()
        self.transitions: List[Transition] = []
        self.ineffective_events: Set[str] = set()
        self.effective_events: Set[str] = set()
        # Candidates a strategy chose never to try; they count as explored.
        self.skipped_events: Set[str] = set()
        self.explored_states: Set[str] = set()

        self.first_state: Optional[DeviceState] = None
        self.last_state: Optional[DeviceState] = None
        self.stop_state: Optional[DeviceState] = None
        self._stop_event = StopHapEvent(hap.bundle_name)

    def _add_node(self, state: DeviceState) -> None:
        if self.first_state is None:
            self.first_state = state
        if self.stop_state is None and state.is_stop():
            self.stop_state = state

        sig = state.content_sig
        if sig in self.content_graph:
            return
        self.content_graph.add_node(sig, state=state)

        struct = state.structural_sig
        if struct in self.structural_graph:
            self.structural_graph.nodes[struct]["states"].append(state)
        else:
            self.structural_graph.add_node(struct, states=[state])

    @staticmethod
    def _add_edge_event(graph: nx.DiGraph, src: str, dst: str, sig: str, entry: Dict[str, Any]) -> None:
        if not graph.has_edge(src, dst):
            graph.add_edge(src, dst, events={})
        graph.edges[src, dst]["events"].setdefault(sig, entry)

    @staticmethod
    def _remove_edge_event(graph: nx.DiGraph, src: str, dst: str, sig: str) -> None:
        if not graph.has_edge(src, dst):
            return
        events = graph.edges[src, dst]["events"]
        events.pop(sig, None)
        if not events:
            graph.remove_edge(src, dst)

    def add_transition(self, event: Event, from_state: DeviceState, to_state: DeviceState) -> None:
        self._add_node(from_state)
        self._add_node(to_state)
        self.transitions.append((from_state, event, to_state))

        sig = event_sig(event, from_state)
        self.last_state = to_state
        if from_state.content_sig == to_state.content_sig:
            self.ineffective_events.add(sig)
            return

        self.effective_events.add(sig)
        entry = {"event": event, "id": len(self.effective_events)}
        self._add_edge_event(self.content_graph, from_state.content_sig, to_state.content_sig, sig, entry)
        self._add_edge_event(
            self.structural_graph, from_state.structural_sig, to_state.structural_sig, sig, entry
        )

    def add_transition_to_stop(self, state: DeviceState) -> None:
        """Make restarts navigable: every foreground state can reach the stop state."""
        if self.stop_state is None or not state.is_foreground():
            return
        self.add_transition(self._stop_event, state, self.stop_state)

    def remove_transition(self, event: Event, from_state: DeviceState, to_state: DeviceState) -> None:
        sig = event_sig(event, from_state)
        self._remove_edge_event(self.content_graph, from_state.content_sig, to_state.content_sig, sig)
        self._remove_edge_event(
            self.structural_graph, from_state.structural_sig, to_state.structural_sig, sig
        )

    def skip_event(self, event: Event, state: DeviceState) -> None:
        self.skipped_events.add(event_sig(event, state))

    def is_event_explored(self, event: Event, state: DeviceState) -> bool:
        sig = event_sig(event, state)
        return sig in self.effective_events or sig in self.ineffective_events or sig in self.skipped_events

    def is_state_explored(self, state: DeviceState) -> bool:
        sig = state.content_sig
        if sig in self.explored_states:
            return True
        for event in state.get_possible_ui_events():
            if not self.is_event_explored(event, state):
                return False
        self.explored_states.add(sig)
        return True

    def get_state(self, sig: str) -> Optional[DeviceState]:
        if sig not in self.content_graph:
            return None
        return self.content_graph.nodes[sig]["state"]

    def get_reachable_states(self, state: DeviceState) -> List[DeviceState]:
        sig = state.content_sig
        if sig not in self.content_graph:
            return []
        return [self.content_graph.nodes[n]["state"] for n in self.content_graph.successors(sig)]

    def iter_states_by_distance(self, state: DeviceState) -> Iterator[DeviceState]:
        """Yield every state reachable from `state`, nearest first."""
        sig = state.content_sig
        if sig not in self.content_graph:
            return
        lengths = nx.single_source_shortest_path_length(self.content_graph, sig)
        for node, _ in sorted(lengths.items(), key=lambda kv: kv[1]):
            if node != sig:
                yield self.content_graph.nodes[node]["state"]

    def _pick_edge_event(self, src: str, dst: str) -> Event:
        entries = list(self.content_graph.edges[src, dst]["events"].values())
        if self.random_input:
            return self.rng.choice(entries)["event"]
        return min(entries, key=lambda e: e["id"])["event"]

    def get_navigation_steps(
        self, from_state: DeviceState, to_state: DeviceState
    ) -> Optional[List[NavigationStep]]:
        src, dst = from_state.content_sig, to_state.content_sig
        try:
            path = nx.bidirectional_shortest_path(self.content_graph, src, dst)
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            self.logger.warning("no path from %s to %s", src[:12], dst[:12])
            return None
        if len(path) < 2:
            return None

        steps: List[NavigationStep] = []
        for a, b in zip(path, path[1:]):
            steps.append((self.content_graph.nodes[a]["state"], self._pick_edge_event(a, b)))
        return steps

    def get_explored_abilities(self) -> List[str]:
        abilities = set()
        for _, state in self.content_graph.nodes(data="state"):
            page = state.page
            if page.bundle_name == self.hap.bundle_name and state.is_foreground() and page.ability_name:
                abilities.add(page.ability_name)
        return sorted(abilities)

    def to_dict(self) -> Dict[str, Any]:
        nodes = []
        for sig, state in self.content_graph.nodes(data="state"):
            nodes.append(
                {
                    "id": sig,
                    "structural_sig": state.structural_sig,
                    "bundle_name": state.page.bundle_name,
                    "ability_name": state.page.ability_name,
                    "page_path": state.page.page_path,
                    "screen": state.screen,
                    "explored": sig in self.explored_states,
                }
            )
        edges = []
        for src, dst, events in self.content_graph.edges(data="events"):
            edges.append(
                {
                    "from": src,
                    "to": dst,
                    "events": [
                        {"sig": sig, "id": entry["id"], "event": entry["event"].to_json()}
                        for sig, entry in sorted(events.items(), key=lambda kv: kv[1]["id"])
                    ],
                }
            )
        return {
            "bundle_name": self.hap.bundle_name,
            "first_state": self.first_state.content_sig if self.first_state else None,
            "nodes": nodes,
            "edges": edges,
            "num_transitions": len(self.transitions),
            "num_effective_events": len(self.effective_events),
            "num_ineffective_events": len(self.ineffective_events),
            "num_skipped_events": len(self.skipped_events),
            "num_explored_states": len(self.explored_states),
        }
