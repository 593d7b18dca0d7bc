from __future__ import annotations

import hashlib

from hap_fakes import button, make_state

from hap_explorer.event.system_event import AbilityEvent, StopHapEvent
from hap_explorer.event.ui_event import TouchEvent
from hap_explorer.model.point import Point
from hap_explorer.model.signature import content_sig, event_sig, stable_sha256, structural_sig


def test_stable_sha256_uses_canonical_json() -> None:
    expected = hashlib.sha256(b'{"a":2,"b":[1,"x"]}').hexdigest()
    assert stable_sha256({"b": [1, "x"], "a": 2}) == expected
    assert stable_sha256({"a": 2, "b": [1, "x"]}) == expected


def test_content_sig_is_stable_across_calls_and_rebuilds() -> None:
    a = make_state("pages/Index", button("ok", text="OK"))
    b = make_state("pages/Index", button("ok", text="OK"))
    assert content_sig(a) == content_sig(a)
    assert content_sig(a) == content_sig(b)
    assert structural_sig(a) == structural_sig(b)


def test_text_change_changes_content_but_not_structure() -> None:
    a = make_state("pages/Index", button("ok", text="OK"))
    b = make_state("pages/Index", button("ok", text="Cancel"))
    assert content_sig(a) != content_sig(b)
    assert structural_sig(a) == structural_sig(b)


def test_page_identity_is_part_of_both_signatures() -> None:
    a = make_state("pages/Index", button("ok"))
    b = make_state("pages/Other", button("ok"))
    assert content_sig(a) != content_sig(b)
    assert structural_sig(a) != structural_sig(b)


def test_sibling_order_does_not_matter() -> None:
    first = button("first", 0, 0, 100, 100)
    second = button("second", 0, 200, 100, 300)
    a = make_state("pages/Index", first, second)
    b = make_state(
        "pages/Index",
        button("second", 0, 200, 100, 300),
        button("first", 0, 0, 100, 100),
    )
    assert content_sig(a) == content_sig(b)
    assert structural_sig(a) == structural_sig(b)


def test_overlapping_siblings_order_does_not_matter() -> None:
    def label(text: str):
        return button("label", 0, 0, 100, 100, type="Text", clickable=False, text=text)

    a = make_state("pages/Index", label("A"), label("B"))
    b = make_state("pages/Index", label("B"), label("A"))
    assert content_sig(a) == content_sig(b)
    assert structural_sig(a) == structural_sig(b)


def test_typed_text_is_ignored() -> None:
    a = make_state("pages/Login", button("user", type="TextInput", text=""))
    b = make_state("pages/Login", button("user", type="TextInput", text="admin"))
    assert content_sig(a) == content_sig(b)


def test_event_sig_depends_on_state_content() -> None:
    a = make_state("pages/Index", button("ok", text="OK"))
    b = make_state("pages/Index", button("ok", text="Other"))
    touch = TouchEvent(Point(10, 10))
    assert event_sig(touch, a) == event_sig(touch, a)
    assert event_sig(touch, a) != event_sig(touch, b)
    assert event_sig(touch, a) != event_sig(TouchEvent(Point(11, 10)), a)


def test_lifecycle_event_sig_is_state_independent() -> None:
    a = make_state("pages/Index", button("ok"))
    b = make_state("pages/Other")
    start = AbilityEvent("com.example.app", "EntryAbility")
    stop = StopHapEvent("com.example.app")
    assert event_sig(start, a) == event_sig(start, b)
    assert event_sig(stop, a) == event_sig(stop, b)
    assert event_sig(start, a) != event_sig(stop, a)


def test_rank_is_not_part_of_any_signature() -> None:
    comp = button("ok")
    state = make_state("pages/Index", comp)
    touch = TouchEvent(comp)
    before_page = stable_sha256(state.page.get_content())
    before_event = event_sig(touch, state)

    comp.rank = 2
    touch.set_rank(2)
    assert touch.rank == 2
    assert stable_sha256(state.page.get_content()) == before_page
    assert event_sig(touch, state) == before_event
