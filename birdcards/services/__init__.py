"""Services layer: loading cards and persisting progress."""

from .card_loader import CardLoader, apply_progress, build_cards
from .progress_store import ProgressStore

__all__ = [
    "CardLoader",
    "ProgressStore",
    "apply_progress",
    "build_cards",
]
