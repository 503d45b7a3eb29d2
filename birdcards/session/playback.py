"""
Audio playback for the active card.

The controller owns the playback state machine; the actual audio output is
delegated to an AudioPlayer so the session stays usable headless.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..exceptions import PlaybackFailure
from ..models import Card, PlaybackState

logger = logging.getLogger(__name__)


class AudioPlayer(ABC):
    """
    Abstract audio output.

    play() may fail synchronously (return False or raise PlaybackFailure) or
    report the failure later through the session's playback_failed().
    """

    @abstractmethod
    def load(self, audio_ref: str, card_id: Optional[str] = None) -> None:
        """
        Point the player at a new clip, replacing the previous one.

        card_id identifies the clip in completion or failure reports so the
        session can ignore events from a clip it already replaced.
        """
        pass

    @abstractmethod
    def play(self) -> bool:
        """Start or resume the loaded clip. Returns False if it was blocked."""
        pass

    @abstractmethod
    def pause(self) -> None:
        pass

    def stop(self) -> None:
        """Tear down the loaded clip."""
        self.pause()

    def close(self) -> None:
        """Release any resources held by the player."""
        pass


class SilentPlayer(AudioPlayer):
    """Headless player that only tracks what it was asked to do."""

    def __init__(self) -> None:
        self.source: Optional[str] = None
        self.card_id: Optional[str] = None
        self.playing: bool = False

    def load(self, audio_ref: str, card_id: Optional[str] = None) -> None:
        self.source = audio_ref
        self.card_id = card_id
        self.playing = False

    def play(self) -> bool:
        self.playing = self.source is not None
        return self.playing

    def pause(self) -> None:
        self.playing = False

    def stop(self) -> None:
        self.playing = False
        self.source = None
        self.card_id = None


class PlaybackController:
    """
    Playback state machine for at most one card at a time.

    idle -> loading -> playing <-> paused, playing/paused -> ended -> idle,
    and any state -> idle when the active card changes.
    """

    def __init__(self, player: Optional[AudioPlayer] = None, autoplay: bool = True):
        self.player = player or SilentPlayer()
        self.autoplay = autoplay
        self._state = PlaybackState.IDLE
        self._card_id: Optional[str] = None

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def card_id(self) -> Optional[str]:
        """Id of the card whose audio is loaded, if any."""
        return self._card_id

    def _set(self, state: PlaybackState) -> None:
        if state is not self._state:
            logger.debug("Playback %s: %s -> %s", self._card_id, self._state.value, state.value)
        self._state = state

    def _start(self) -> None:
        try:
            started = self.player.play()
        except PlaybackFailure as e:
            logger.info("Playback of %s failed to start: %s", self._card_id, e)
            started = False
        self._set(PlaybackState.PLAYING if started else PlaybackState.PAUSED)

    def attach(self, card: Optional[Card], autoplay: Optional[bool] = None) -> None:
        """
        Make `card` the active card, tearing down any previous clip first.

        With autoplay the clip is started straight away; a blocked start
        leaves the state paused so the learner can start it manually.
        """
        self.detach()
        if card is None:
            return

        self._card_id = card.id
        self.player.load(card.audio_ref, card.id)
        self._set(PlaybackState.LOADING)

        if self.autoplay if autoplay is None else autoplay:
            self._start()
        else:
            self._set(PlaybackState.IDLE)

    def detach(self) -> None:
        """Stop any active clip and return to idle."""
        if self._card_id is not None:
            self.player.stop()
        self._card_id = None
        self._set(PlaybackState.IDLE)

    def toggle(self) -> PlaybackState:
        """Learner play/pause intent."""
        if self._card_id is None:
            return self._state
        if self._state is PlaybackState.PLAYING:
            self.player.pause()
            self._set(PlaybackState.PAUSED)
        else:
            self._start()
        return self._state

    def pause(self) -> None:
        """Pause if playing; no effect in any other state."""
        if self._state is PlaybackState.PLAYING:
            self.player.pause()
            self._set(PlaybackState.PAUSED)

    def ended(self) -> None:
        """Natural end of the clip: ended, then straight back to idle."""
        if self._state in (PlaybackState.PLAYING, PlaybackState.PAUSED):
            self._set(PlaybackState.ENDED)
            self._set(PlaybackState.IDLE)

    def failed(self, reason: str = "") -> None:
        """Asynchronous start failure reported by the player."""
        if self._state in (PlaybackState.LOADING, PlaybackState.PLAYING):
            logger.info("Playback of %s failed: %s", self._card_id, reason or "unknown error")
            self._set(PlaybackState.PAUSED)
