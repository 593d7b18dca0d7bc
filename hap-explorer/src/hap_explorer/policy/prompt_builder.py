from __future__ import annotations

import random
import string
from typing import Iterable, List, Optional, Sequence, Tuple

from hap_explorer.event.event import Event
from hap_explorer.event.key_event import BACK_KEY_EVENT
from hap_explorer.event.ui_event import Direct, InputTextEvent, LongTouchEvent, ScrollEvent, TouchEvent
from hap_explorer.model.component import Component

TASK_PROMPT = (
    "You are an expert in App GUI testing. Please guide the testing tool to enhance the coverage "
    "of functional scenarios in testing the App based on your extensive App testing experience."
)
QUESTION_PROMPT = "Which action to choose? Just return action ID based on the given action id."

_MAX_TEXT = 20


def _shorten(text: str, limit: int = _MAX_TEXT) -> str:
    text = text.replace("\n", "  ")
    return f"{text[:limit]}..." if len(text) > limit else text


def _random_text(rng: random.Random, length: int = 10) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(rng.choice(alphabet) for _ in range(length))


def describe_component(component: Component) -> str:
    status = ""
    if component.inputable:
        status += "editable"
    if component.checked or component.selected:
        status += "checked"
    desc = f"a {status} view " if status else "a view "
    if component.hint:
        desc += f"which described as {_shorten(component.hint)} "
    if component.text:
        desc += f"with text {_shorten(component.text)} "
    return desc


def create_action_prompt_with_events(
    components: Iterable[Component],
    rng: Optional[random.Random] = None,
) -> Tuple[str, List[Event], List[str]]:
    """Number every action the components offer.

    Returns the prompt text, the events and a description per event; action
    ``i`` in the prompt is ``events[i - 1]``.
    """
    rng = rng or random.Random()
    events: List[Event] = []
    actions: List[str] = []

    def add(event: Event, description: str) -> None:
        events.append(event)
        actions.append(f"- {description} ({len(events)})")

    for component in components:
        if not component.has_ui_event():
            continue
        view = describe_component(component)
        if component.inputable:
            add(InputTextEvent(component, _random_text(rng)), f"{view}that can edit")
        if component.checkable or component.clickable:
            add(TouchEvent(component), f"{view}that can click")
        if component.long_clickable:
            add(LongTouchEvent(component), f"{view}that can long click")
        if component.scrollable:
            for direct in (Direct.DOWN, Direct.UP, Direct.LEFT, Direct.RIGHT):
                add(ScrollEvent(component, direct), f"{view}that can scroll {direct.value.lower()}")
    add(BACK_KEY_EVENT, "a key to go back")

    prompt = (
        "The current state has the following UI views and corresponding actions, "
        "with action id in parentheses:\n" + ";\n".join(actions)
    )
    return prompt, events, actions


def build_prompt(
    ability_name: str,
    explored_abilities: Sequence[str],
    action_history: Sequence[str],
    action_prompt: str,
    task_prompt: str = TASK_PROMPT,
) -> str:
    task = (
        f"{task_prompt} The App is stuck on the {ability_name} page, unable to explore more features. "
        "Your task is to select an action based on the current GUI information to perform next "
        "and help the app escape the UI tarpit."
    )
    explored = "I have already explored the following abilities:\n" + "\n".join(explored_abilities)
    history = (
        "I have already tried the following steps with action id in parentheses which should not be "
        "selected anymore:\n" + ";\n".join(action_history)
    )
    return "\n".join([task, explored, history, action_prompt, QUESTION_PROMPT])
