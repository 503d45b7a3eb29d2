"""
Deck Session Engine - the single owner of a study session's state.

Holds the card collection, the active filter, the navigation cursor, the
view mode, the catalog query and the playback controller. Every mutation
recomputes the derived view explicitly before returning, so callers never
observe stale derived state.
"""

import logging
import random
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from ..config import Config
from ..exceptions import CardNotFound, DataFetchFailure
from ..models import (
    Card,
    Direction,
    FilterMode,
    PlaybackState,
    SessionStatus,
    ViewMode,
)
from ..services.card_loader import apply_progress
from ..utils.helpers import shuffled
from .playback import AudioPlayer, PlaybackController
from .search import SearchIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything the presentation layer needs to render one frame."""

    status: SessionStatus
    error: Optional[str]
    filter_mode: FilterMode
    view_mode: ViewMode
    query: str
    view: Tuple[Card, ...]
    cursor: int
    current_card: Optional[Card]
    flipped: bool
    playback_state: PlaybackState
    playing_card_id: Optional[str]
    collection_size: int
    learned_count: int
    starred_count: int

    @property
    def position(self) -> int:
        """1-based position of the current card, 0 when the view is empty."""
        return self.cursor + 1 if self.current_card is not None else 0

    @property
    def total(self) -> int:
        return len(self.view)

    @property
    def search_active(self) -> bool:
        """True when a catalog query is narrowing the view."""
        return self.view_mode is ViewMode.CATALOG and bool(self.query.strip())


class DeckSession:
    """
    Study session over one deck of bird-call cards.

    Usage:
        session = DeckSession(progress_store=ProgressStore())
        async with CardLoader() as loader:
            await session.load(loader)
        session.next()
        session.flip()
        session.toggle_learned(session.current_card.id)
    """

    def __init__(
        self,
        progress_store=None,
        player: Optional[AudioPlayer] = None,
        rng: Optional[random.Random] = None,
        autoplay: Optional[bool] = None,
        score_cutoff: Optional[int] = None,
    ):
        """
        Initialize an empty session.

        Args:
            progress_store: Store receiving a save after every flag change
            player: Audio output (defaults to a headless SilentPlayer)
            rng: Random source for shuffling
            autoplay: Start a card's audio when it becomes current
                (defaults to Config.AUTOPLAY)
            score_cutoff: Minimum fuzzy score for catalog search results
        """
        self._store = progress_store
        self._rng = rng or random.Random()
        self._score_cutoff = score_cutoff
        self.playback = PlaybackController(
            player, autoplay=Config.AUTOPLAY if autoplay is None else autoplay
        )

        self._collection: Tuple[Card, ...] = ()
        self._version: int = 0
        self._filter = FilterMode.ALL
        self._view_mode = ViewMode.STUDY
        self._query: str = ""
        self._cursor: int = 0
        self._flipped: bool = False
        self._status = SessionStatus.LOADING
        self._error: Optional[str] = None

        # Memoized derivations
        self._view: Tuple[Card, ...] = ()
        self._view_key: Optional[tuple] = None
        self._index: Optional[SearchIndex] = None
        self._index_key: Optional[tuple] = None

        self._change_callbacks: List[Callable[[], None]] = []

    # =========================================================================
    # CHANGE NOTIFICATION
    # =========================================================================

    def on_change(self, callback: Callable[[], None]) -> None:
        """
        Register a callback for state changes.

        Args:
            callback: Function to call after every engine operation
        """
        self._change_callbacks.append(callback)

    def _notify_change(self) -> None:
        """Notify all registered callbacks of a state change."""
        for callback in self._change_callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Change callback %r failed", callback)

    # =========================================================================
    # DERIVED STATE
    # =========================================================================

    def _filtered(self) -> Tuple[Card, ...]:
        return tuple(card for card in self._collection if self._filter.matches(card))

    def _search_index(self, cards: Tuple[Card, ...]) -> SearchIndex:
        key = (self._version, self._filter)
        if self._index is None or self._index_key != key:
            self._index = SearchIndex(cards, score_cutoff=self._score_cutoff)
            self._index_key = key
        return self._index

    def _derive_view(self) -> Tuple[Card, ...]:
        """Recompute the view, reusing the last result when its inputs are unchanged."""
        query = self._query.strip() if self._view_mode is ViewMode.CATALOG else ""
        key = (self._version, self._filter, self._view_mode, query)
        if key != self._view_key:
            filtered = self._filtered()
            if query:
                self._view = tuple(self._search_index(filtered).search(query))
            else:
                self._view = filtered
            self._view_key = key
        return self._view

    def _sync_playback(self) -> None:
        """A new card became current: reset its playback."""
        if self._view_mode is ViewMode.STUDY:
            self.playback.attach(self.current_card)
        else:
            self.playback.detach()

    def _refresh_view(self, reset_cursor: bool = True) -> None:
        """
        Recompute the view and reset per-card transient state.

        The cursor goes back to 0 when asked to or when it no longer points
        into the view.
        """
        view = self._derive_view()
        if reset_cursor or self._cursor >= len(view):
            self._cursor = 0
        self._flipped = False
        self._sync_playback()

    def _replace_collection(self, cards: Sequence[Card]) -> None:
        self._collection = tuple(cards)
        self._version += 1

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def collection(self) -> Tuple[Card, ...]:
        return self._collection

    @property
    def view(self) -> Tuple[Card, ...]:
        return self._derive_view()

    @property
    def filter_mode(self) -> FilterMode:
        return self._filter

    @property
    def view_mode(self) -> ViewMode:
        return self._view_mode

    @property
    def query(self) -> str:
        return self._query

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def flipped(self) -> bool:
        return self._flipped

    @property
    def playback_state(self) -> PlaybackState:
        return self.playback.state

    @property
    def current_card(self) -> Optional[Card]:
        view = self._derive_view()
        if not view or self._cursor >= len(view):
            return None
        return view[self._cursor]

    @property
    def learned_count(self) -> int:
        return sum(1 for card in self._collection if card.learned)

    @property
    def starred_count(self) -> int:
        return sum(1 for card in self._collection if card.starred)

    def get_card(self, card_id: str) -> Card:
        """Look up a card by id, raising CardNotFound if it is absent."""
        for card in self._collection:
            if card.id == card_id:
                return card
        raise CardNotFound(card_id)

    def flags(self) -> Dict[str, Dict[str, bool]]:
        """Progress flags for the whole collection, in storage layout."""
        return {card.id: card.flags() for card in self._collection}

    def snapshot(self) -> SessionSnapshot:
        """Immutable copy of the state the presentation layer renders."""
        return SessionSnapshot(
            status=self._status,
            error=self._error,
            filter_mode=self._filter,
            view_mode=self._view_mode,
            query=self._query,
            view=self._derive_view(),
            cursor=self._cursor,
            current_card=self.current_card,
            flipped=self._flipped,
            playback_state=self.playback.state,
            playing_card_id=self.playback.card_id,
            collection_size=len(self._collection),
            learned_count=self.learned_count,
            starred_count=self.starred_count,
        )

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def initialize(self, cards: Sequence[Card]) -> SessionStatus:
        """
        Start the session on a validated card list.

        The order is randomized so repeat sessions vary. An empty list is a
        valid "no cards" state, not an error.

        Raises:
            ValueError: if two cards share an id
        """
        ids = [card.id for card in cards]
        if len(set(ids)) != len(ids):
            raise ValueError("Card ids must be unique within a collection")

        self._replace_collection(shuffled(cards, self._rng))
        self._filter = FilterMode.ALL
        self._error = None
        self._status = SessionStatus.READY if self._collection else SessionStatus.EMPTY
        self._refresh_view()

        logger.info("Session initialized with %d cards", len(self._collection))
        self._notify_change()
        return self._status

    def fail(self, message: str) -> None:
        """Enter the blocking error state; no partial collection is kept."""
        self._replace_collection(())
        self._status = SessionStatus.ERROR
        self._error = message
        self._refresh_view()
        self._notify_change()

    async def load(self, loader) -> SessionStatus:
        """
        Load cards through `loader`, overlay stored progress and initialize.

        A DataFetchFailure puts the session into the error state instead of
        propagating.
        """
        self._status = SessionStatus.LOADING
        self._notify_change()

        try:
            cards = await loader.load()
        except DataFetchFailure as e:
            self.fail(str(e))
            return self._status

        if self._store is not None:
            cards = apply_progress(cards, self._store.load())
        return self.initialize(cards)

    def close(self) -> None:
        """End the session: stop audio and release the player."""
        self.playback.detach()
        self.playback.player.close()

    # =========================================================================
    # INTENTS
    # =========================================================================

    def set_filter(self, mode: Union[FilterMode, str]) -> None:
        """Apply a filter; the cursor returns to the first matching card."""
        self._filter = FilterMode(mode)
        self._refresh_view()
        logger.debug("Filter set to %s (%d cards)", self._filter.value, len(self._view))
        self._notify_change()

    def advance(self, direction: Union[Direction, str] = Direction.FORWARD) -> None:
        """Move circularly through the view and show the new card's front face."""
        direction = Direction(direction)
        length = len(self._derive_view())
        if length <= 1:
            return

        step = 1 if direction is Direction.FORWARD else -1
        self._cursor = (self._cursor + step + length) % length
        self._flipped = False
        self._sync_playback()
        self._notify_change()

    def next(self) -> None:
        self.advance(Direction.FORWARD)

    def previous(self) -> None:
        self.advance(Direction.BACKWARD)

    def flip(self) -> None:
        """
        Turn the current card over.

        Revealing the back face pauses playing audio; turning back to the
        front never resumes it.
        """
        if not self._derive_view():
            return
        self._flipped = not self._flipped
        if self._flipped:
            self.playback.pause()
        self._notify_change()

    def toggle_learned(self, card_id: str) -> Card:
        return self._toggle(card_id, "learned")

    def toggle_starred(self, card_id: str) -> Card:
        return self._toggle(card_id, "starred")

    def _toggle(self, card_id: str, flag: str) -> Card:
        """
        Flip one persistent flag, save, and recompute the view.

        If the view's membership changed the cursor returns to 0; otherwise
        the position, face and audio of the current card are kept.
        """
        card = self.get_card(card_id)
        before = [c.id for c in self._derive_view()]

        updated = replace(card, **{flag: not getattr(card, flag)})
        self._replace_collection(updated if c.id == card_id else c for c in self._collection)

        if self._store is not None:
            self._store.schedule_save(self.flags())

        after = [c.id for c in self._derive_view()]
        if after != before:
            self._refresh_view()

        self._notify_change()
        return updated

    def shuffle(self) -> None:
        """Reorder the whole collection; the filter is kept."""
        if len(self._collection) <= 1:
            return
        self._replace_collection(shuffled(self._collection, self._rng))
        self._refresh_view()
        logger.info("Deck shuffled.")
        self._notify_change()

    def set_view_mode(self, mode: Union[ViewMode, str]) -> None:
        """Switch between study and catalog; the collection is untouched."""
        self._view_mode = ViewMode(mode)
        self._refresh_view(reset_cursor=False)
        self._notify_change()

    def toggle_view_mode(self) -> None:
        self.set_view_mode(
            ViewMode.CATALOG if self._view_mode is ViewMode.STUDY else ViewMode.STUDY
        )

    def search(self, query: str) -> List[Card]:
        """
        Fuzzy search the filtered collection by name.

        In catalog mode the result also becomes the view. A blank query
        returns every card in collection order.
        """
        self._query = query or ""
        if self._view_mode is ViewMode.CATALOG:
            view = self._derive_view()
            self._cursor = 0
            if (self.playback.card_id is not None
                    and all(card.id != self.playback.card_id for card in view)):
                self.playback.detach()
            self._notify_change()
            return list(view)
        return self._search_index(self._filtered()).search(self._query)

    # =========================================================================
    # PLAYBACK
    # =========================================================================

    def toggle_playback(self, card_id: Optional[str] = None) -> PlaybackState:
        """
        Play/pause intent.

        In study mode this targets the current card. In catalog mode any card
        of the view can be played; starting one stops the previous clip.
        """
        if self._view_mode is ViewMode.CATALOG and card_id is not None:
            if card_id != self.playback.card_id:
                self.playback.attach(self.get_card(card_id), autoplay=True)
            else:
                self.playback.toggle()
        elif self.current_card is not None:
            if self.playback.card_id != self.current_card.id:
                self.playback.attach(self.current_card, autoplay=False)
            self.playback.toggle()
        self._notify_change()
        return self.playback.state

    def _is_active(self, card_id: Optional[str]) -> bool:
        return card_id is None or card_id == self.playback.card_id

    def playback_ended(self, card_id: Optional[str] = None) -> None:
        """The player reports the clip finished naturally."""
        if self._is_active(card_id):
            self.playback.ended()
            self._notify_change()

    def playback_failed(self, card_id: Optional[str] = None, reason: str = "") -> None:
        """The player reports the clip could not be started."""
        if self._is_active(card_id):
            self.playback.failed(reason)
            self._notify_change()
