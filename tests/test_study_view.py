import random

from birdcards.models import FilterMode
from birdcards.session import DeckSession
from birdcards.ui import StudyView

from conftest import make_card


def _view(cards):
    deck = DeckSession(rng=random.Random(5), autoplay=False)
    deck.initialize(cards)
    view = StudyView(None, deck)
    view.refresh(deck.snapshot())
    return deck, view


def test_navigation_enabled_with_several_cards(cards):
    _, view = _view(cards)
    assert view._previous_button.disabled is False
    assert view._next_button.disabled is False
    assert view._counter.value == f"Card 1 of {len(cards)}"


def test_navigation_disabled_for_single_card():
    _, view = _view([make_card("Eurasian Wren")])
    assert view._previous_button.disabled is True
    assert view._next_button.disabled is True


def test_navigation_follows_filtered_view(cards):
    deck, view = _view(cards)
    deck.toggle_starred(deck.current_card.id)
    deck.set_filter(FilterMode.STARRED)
    view.refresh(deck.snapshot())
    assert view._next_button.disabled is True

    deck.set_filter(FilterMode.ALL)
    view.refresh(deck.snapshot())
    assert view._next_button.disabled is False
