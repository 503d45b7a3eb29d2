"""Data models for BirdCards."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional


@dataclass(frozen=True)
class Card:
    """One learnable bird call: audio, identifying metadata and progress flags."""

    # Audio filename, doubles as the natural key
    id: str
    audio_ref: str
    display_name: str
    image_ref: Optional[str] = None

    # Learner progress
    learned: bool = False
    starred: bool = False

    def flags(self) -> Dict[str, bool]:
        """Persistent progress flags in storage layout."""
        return {"learned": self.learned, "starred": self.starred}


class FilterMode(Enum):
    """Named predicates selecting cards by progress state."""
    ALL = "all"
    UNLEARNED = "unlearned"
    LEARNED = "learned"
    STARRED = "starred"

    def matches(self, card: Card) -> bool:
        return _PREDICATES[self](card)


_PREDICATES: Dict[FilterMode, Callable[[Card], bool]] = {
    FilterMode.ALL: lambda card: True,
    FilterMode.UNLEARNED: lambda card: not card.learned,
    FilterMode.LEARNED: lambda card: card.learned,
    FilterMode.STARRED: lambda card: card.starred,
}


class ViewMode(Enum):
    """Single-card navigation or full-list browsing."""
    STUDY = "study"
    CATALOG = "catalog"


class Direction(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


class PlaybackState(Enum):
    """Audio status of the active card."""
    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"


class SessionStatus(Enum):
    """What the presentation layer should show for the session as a whole."""
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"
