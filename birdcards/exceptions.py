"""Error taxonomy for BirdCards.

Only DataFetchFailure is meant to reach the learner as a blocking error.
The other failures are logged and degrade gracefully.
"""


class BirdCardsError(Exception):
    """Base class for all BirdCards errors."""


class DataFetchFailure(BirdCardsError):
    """The manifest or mapping could not be loaded or has the wrong shape."""


class PersistenceFailure(BirdCardsError):
    """Progress could not be read from or written to local storage."""


class PlaybackFailure(BirdCardsError):
    """An audio clip could not be started."""


class CardNotFound(BirdCardsError, LookupError):
    """No card with the requested id exists in the collection."""

    def __init__(self, card_id: str):
        super().__init__(f"No card with id {card_id!r}")
        self.card_id = card_id
