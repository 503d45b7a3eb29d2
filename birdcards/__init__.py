"""BirdCards - Bird call flashcards"""

__version__ = "1.0.0"
__author__ = "BirdCards Team"

from .config import Config
from .models import Card, FilterMode, ViewMode, PlaybackState, SessionStatus
from .services import CardLoader, ProgressStore
from .session import DeckSession, SearchIndex

__all__ = [
    'Config',
    'Card',
    'FilterMode',
    'ViewMode',
    'PlaybackState',
    'SessionStatus',
    'CardLoader',
    'ProgressStore',
    'DeckSession',
    'SearchIndex',
]
