"""
Study View - single-card navigation
-----------------------------------

Front face: listen to the call. Back face: the bird's image and name.
"""

from typing import Optional

import flet as ft

from ..models import Card, PlaybackState
from ..session import DeckSession, SessionSnapshot
from .theme import DesignTokens


def bird_image(src: Optional[str], alt: str, width: int, height: int) -> ft.Control:
    """Image with a placeholder for cards without one (or broken files)."""
    placeholder = ft.Container(
        content=ft.Column(
            controls=[
                ft.Icon(ft.Icons.IMAGE_NOT_SUPPORTED_OUTLINED, color=ft.Colors.WHITE38, size=32),
                ft.Text("Image not found", size=11, color=ft.Colors.WHITE38),
            ],
            alignment=ft.MainAxisAlignment.CENTER,
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            spacing=4,
        ),
        width=width,
        height=height,
        bgcolor=DesignTokens.BG_ELEVATED,
        border_radius=DesignTokens.RADIUS,
    )
    if not src:
        return placeholder
    return ft.Image(
        src=src,
        width=width,
        height=height,
        fit=ft.ImageFit.COVER,
        semantics_label=alt,
        border_radius=DesignTokens.RADIUS,
        error_content=placeholder,
    )


class StudyView:
    """Flashcard screen driven entirely by the session's snapshot."""

    def __init__(self, page: ft.Page, session: DeckSession) -> None:
        self.page = page
        self.session = session
        self._card_slot = ft.Container(
            width=DesignTokens.CARD_WIDTH,
            height=DesignTokens.CARD_HEIGHT,
        )
        self._counter = ft.Text("", size=13, color=DesignTokens.TEXT_SECONDARY)
        self._previous_button = ft.IconButton(
            icon=ft.Icons.CHEVRON_LEFT,
            tooltip="Previous card",
            on_click=lambda e: self.session.previous(),
        )
        self._next_button = ft.IconButton(
            icon=ft.Icons.CHEVRON_RIGHT,
            tooltip="Next card",
            on_click=lambda e: self.session.next(),
        )
        self._container = self._build_view()

    @property
    def container(self) -> ft.Container:
        """Get the main container for this view."""
        return self._container

    def _build_view(self) -> ft.Container:
        navigation = ft.Row(
            controls=[self._previous_button, self._counter, self._next_button],
            alignment=ft.MainAxisAlignment.CENTER,
            spacing=16,
        )
        return ft.Container(
            content=ft.Column(
                controls=[self._card_slot, navigation],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                spacing=16,
            ),
            alignment=ft.Alignment(0, 0),
            expand=True,
        )

    # =========================================================================
    # CARD FACES
    # =========================================================================

    def _status_buttons(self, card: Card) -> ft.Row:
        return ft.Row(
            controls=[
                ft.IconButton(
                    icon=ft.Icons.STAR if card.starred else ft.Icons.STAR_BORDER,
                    icon_color=DesignTokens.ACCENT_STARRED if card.starred else ft.Colors.WHITE70,
                    tooltip="Unstar card" if card.starred else "Star card",
                    on_click=lambda e: self.session.toggle_starred(card.id),
                ),
                ft.IconButton(
                    icon=ft.Icons.CHECK_BOX if card.learned else ft.Icons.CHECK_BOX_OUTLINE_BLANK,
                    icon_color=DesignTokens.ACCENT_LEARNED if card.learned else ft.Colors.WHITE70,
                    tooltip="Mark as not learned" if card.learned else "Mark as learned",
                    on_click=lambda e: self.session.toggle_learned(card.id),
                ),
            ],
            alignment=ft.MainAxisAlignment.END,
            spacing=4,
        )

    def _front_face(self, snapshot: SessionSnapshot) -> ft.Control:
        playing = snapshot.playback_state is PlaybackState.PLAYING
        loading = snapshot.playback_state is PlaybackState.LOADING
        play_button: ft.Control = (
            ft.ProgressRing(width=28, height=28, color=DesignTokens.FRONT_TEXT)
            if loading else
            ft.IconButton(
                icon=ft.Icons.PAUSE_CIRCLE_FILLED if playing else ft.Icons.PLAY_CIRCLE_FILLED,
                icon_size=56,
                icon_color=DesignTokens.FRONT_TEXT,
                tooltip="Pause audio" if playing else "Play audio",
                on_click=lambda e: self.session.toggle_playback(),
            )
        )
        return ft.Container(
            content=ft.Column(
                controls=[
                    ft.Text("Listen", size=18, weight=ft.FontWeight.W_600, color=DesignTokens.FRONT_TEXT),
                    play_button,
                    ft.TextButton("Show bird name", icon=ft.Icons.FLIP, on_click=lambda e: self.session.flip()),
                ],
                alignment=ft.MainAxisAlignment.CENTER,
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                spacing=12,
            ),
            gradient=ft.LinearGradient(
                begin=ft.Alignment(-1, -1),
                end=ft.Alignment(1, 1),
                colors=[DesignTokens.FRONT_START, DesignTokens.FRONT_END],
            ),
            expand=True,
        )

    def _back_face(self, card: Card) -> ft.Control:
        return ft.Stack(
            controls=[
                bird_image(card.image_ref, card.display_name,
                           DesignTokens.CARD_WIDTH, DesignTokens.CARD_HEIGHT),
                ft.Container(
                    content=ft.Column(
                        controls=[
                            ft.Text(card.display_name, size=22, weight=ft.FontWeight.BOLD,
                                    color=ft.Colors.WHITE, text_align=ft.TextAlign.CENTER),
                            ft.TextButton("Show audio player", icon=ft.Icons.FLIP,
                                          on_click=lambda e: self.session.flip()),
                        ],
                        alignment=ft.MainAxisAlignment.END,
                        horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                    ),
                    gradient=ft.LinearGradient(
                        begin=ft.Alignment(0, 1),
                        end=ft.Alignment(0, -1),
                        colors=["#80000000", "#00000000"],
                    ),
                    padding=16,
                    expand=True,
                ),
            ],
            width=DesignTokens.CARD_WIDTH,
            height=DesignTokens.CARD_HEIGHT,
        )

    def _empty_card(self) -> ft.Control:
        return ft.Container(
            content=ft.Text("No cards match the current filter.", color=DesignTokens.TEXT_SECONDARY),
            alignment=ft.Alignment(0, 0),
            bgcolor=DesignTokens.BG_CARD,
            border_radius=DesignTokens.RADIUS,
        )

    # =========================================================================
    # RENDER
    # =========================================================================

    def refresh(self, snapshot: SessionSnapshot) -> None:
        """Rebuild the card slot from the latest session state."""
        card = snapshot.current_card
        self._previous_button.disabled = snapshot.total <= 1
        self._next_button.disabled = snapshot.total <= 1
        if card is None:
            self._card_slot.content = self._empty_card()
            self._counter.value = ""
            return

        face = self._back_face(card) if snapshot.flipped else self._front_face(snapshot)
        self._card_slot.content = ft.Stack(
            controls=[
                ft.Container(
                    content=face,
                    on_click=lambda e: self.session.flip(),
                    border_radius=DesignTokens.RADIUS,
                    clip_behavior=ft.ClipBehavior.HARD_EDGE,
                    expand=True,
                ),
                ft.Container(content=self._status_buttons(card), padding=8),
            ],
            width=DesignTokens.CARD_WIDTH,
            height=DesignTokens.CARD_HEIGHT,
        )
        self._counter.value = f"Card {snapshot.position} of {snapshot.total}"
