import os
import random
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from birdcards.exceptions import PlaybackFailure
from birdcards.models import Card
from birdcards.session import DeckSession, SilentPlayer


BIRDS = [
    "Common Blackbird",
    "Eurasian Blackcap",
    "Black Redstart",
    "Eurasian Wren",
    "Song Thrush",
]


def make_card(name, learned=False, starred=False, image=True):
    filename = name.replace(" ", "_") + ".mp3"
    return Card(
        id=filename,
        audio_ref=f"/audio/{filename}",
        display_name=name,
        image_ref=f"/bird_images/{name.replace(' ', '_')}.jpg" if image else None,
        learned=learned,
        starred=starred,
    )


class BlockedPlayer(SilentPlayer):
    """Autoplay is refused, as a browser would without a user gesture."""

    def play(self):
        return False


class BrokenPlayer(SilentPlayer):
    def play(self):
        raise PlaybackFailure("decode error")


class RecordingStore:
    """Progress store double that remembers every scheduled save."""

    def __init__(self, stored=None):
        self.stored = stored or {}
        self.saves = []

    def load(self):
        return self.stored

    def schedule_save(self, progress):
        self.saves.append(progress)


@pytest.fixture
def cards():
    return [make_card(name) for name in BIRDS]


@pytest.fixture
def player():
    return SilentPlayer()


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def session(cards, player, store):
    deck = DeckSession(progress_store=store, player=player, rng=random.Random(7), autoplay=True)
    deck.initialize(cards)
    return deck
