"""Deck session module - engine, playback and search."""

from .engine import DeckSession, SessionSnapshot
from .playback import AudioPlayer, PlaybackController, SilentPlayer
from .search import SearchIndex

__all__ = [
    'DeckSession',
    'SessionSnapshot',
    'AudioPlayer',
    'PlaybackController',
    'SilentPlayer',
    'SearchIndex',
]
