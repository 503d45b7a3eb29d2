"""Fuzzy name search for the catalog view."""

from typing import List, Optional, Sequence

from thefuzz import fuzz

from ..config import Config
from ..models import Card


class SearchIndex:
    """
    Rank cards by approximate match of their display names.

    A query equal to a card's full name (ignoring case and surrounding
    whitespace) always ranks that card first. Ties keep collection order.
    """

    def __init__(self, cards: Sequence[Card], score_cutoff: Optional[int] = None):
        self._cards = tuple(cards)
        self.score_cutoff = Config.SEARCH_SCORE_CUTOFF if score_cutoff is None else score_cutoff

    def __len__(self) -> int:
        return len(self._cards)

    def score(self, query: str, card: Card) -> int:
        """0-100 similarity between the query and the card's name."""
        return fuzz.WRatio(query, card.display_name)

    def search(self, query: str) -> List[Card]:
        """
        Search cards by display name.

        Args:
            query: Free text, possibly partial or misspelled

        Returns:
            All cards in order for a blank query, otherwise the matching
            cards best first (possibly an empty list)
        """
        query = (query or "").strip()
        if not query:
            return list(self._cards)

        needle = query.casefold()
        ranked = []
        for position, card in enumerate(self._cards):
            exact = card.display_name.strip().casefold() == needle
            score = 100 if exact else self.score(query, card)
            if exact or score >= self.score_cutoff:
                ranked.append((not exact, -score, position, card))

        ranked.sort(key=lambda entry: entry[:3])
        return [entry[3] for entry in ranked]
