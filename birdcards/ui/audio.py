"""Flet-backed audio output for the deck session."""

import logging
from typing import Callable, Optional

import flet as ft

from ..exceptions import PlaybackFailure
from ..session import AudioPlayer

logger = logging.getLogger(__name__)


class FletAudioPlayer(AudioPlayer):
    """
    Play clips with Flet's native Audio control.

    One control lives in the page overlay at a time; loading a new clip
    replaces it. Natural completion is forwarded to on_ended with the id of
    the card the finished control was loaded for.
    """

    def __init__(
        self,
        page: ft.Page,
        on_ended: Optional[Callable[[Optional[str]], None]] = None,
    ) -> None:
        self.page = page
        self.on_ended = on_ended
        self._audio: Optional[ft.Audio] = None

    def _remove_control(self) -> None:
        if self._audio is None:
            return
        self._audio.pause()
        if self._audio in self.page.overlay:
            self.page.overlay.remove(self._audio)
        self._audio = None

    def _on_state_changed(self, e: ft.ControlEvent, card_id: Optional[str] = None) -> None:
        """Handle audio player state changes."""
        state = str(e.data).lower() if e.data else ""
        if "completed" in state and self.on_ended:
            self.on_ended(card_id)

    def _on_loaded(self, e: ft.ControlEvent) -> None:
        logger.debug("Audio loaded: %s", self._audio.src if self._audio else None)

    def load(self, audio_ref: str, card_id: Optional[str] = None) -> None:
        self._remove_control()
        self._audio = ft.Audio(
            src=audio_ref,
            autoplay=False,
            volume=1.0,
            balance=0,
            on_loaded=self._on_loaded,
            on_state_changed=lambda e: self._on_state_changed(e, card_id),
        )
        self.page.overlay.append(self._audio)
        self.page.update()

    def play(self) -> bool:
        if self._audio is None:
            return False
        try:
            if self._audio.get_current_position():
                self._audio.resume()
            else:
                self._audio.play()
        except Exception as e:
            raise PlaybackFailure(str(e)) from e
        return True

    def pause(self) -> None:
        if self._audio is not None:
            self._audio.pause()

    def stop(self) -> None:
        self._remove_control()
        self.page.update()

    def close(self) -> None:
        self._remove_control()
