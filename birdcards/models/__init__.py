"""Data models for BirdCards."""

from .card import (
    Card,
    Direction,
    FilterMode,
    PlaybackState,
    SessionStatus,
    ViewMode,
)

__all__ = [
    'Card',
    'Direction',
    'FilterMode',
    'PlaybackState',
    'SessionStatus',
    'ViewMode',
]
