"""
Catalog View - full-list browsing with fuzzy search
---------------------------------------------------

Every card of the view as a row: thumbnail, name, Wikipedia link, play/pause
and the star/learned toggles. Only one row plays at a time.
"""

import flet as ft

from ..models import Card, PlaybackState
from ..session import DeckSession, SessionSnapshot
from ..utils.paths import MediaPathGenerator
from .study_view import bird_image
from .theme import DesignTokens


class CatalogView:
    """All-cards screen with a search field."""

    def __init__(self, page: ft.Page, session: DeckSession) -> None:
        self.page = page
        self.session = session
        self._title = ft.Text("", size=20, weight=ft.FontWeight.W_600, color=DesignTokens.TEXT_PRIMARY)
        self._search_field = ft.TextField(
            hint_text="Search birds by name...",
            prefix_icon=ft.Icons.SEARCH,
            on_change=lambda e: self.session.search(e.control.value),
            dense=True,
        )
        self._rows = ft.Column(spacing=8, scroll=ft.ScrollMode.AUTO, expand=True)
        self._container = ft.Container(
            content=ft.Column(
                controls=[self._title, self._search_field, self._rows],
                spacing=12,
                expand=True,
            ),
            expand=True,
        )

    @property
    def container(self) -> ft.Container:
        """Get the main container for this view."""
        return self._container

    def _row(self, card: Card, snapshot: SessionSnapshot) -> ft.Container:
        playing = (snapshot.playing_card_id == card.id
                   and snapshot.playback_state is PlaybackState.PLAYING)
        return ft.Container(
            content=ft.Row(
                controls=[
                    bird_image(card.image_ref, card.display_name,
                               DesignTokens.THUMB_SIZE, DesignTokens.THUMB_SIZE),
                    ft.Column(
                        controls=[
                            ft.Text(card.display_name, size=15, weight=ft.FontWeight.W_500,
                                    color=DesignTokens.TEXT_PRIMARY),
                            ft.TextButton(
                                "Wikipedia",
                                icon=ft.Icons.OPEN_IN_NEW,
                                url=MediaPathGenerator.wikipedia_search_url(card.display_name),
                            ),
                        ],
                        spacing=2,
                        expand=True,
                    ),
                    ft.IconButton(
                        icon=ft.Icons.PAUSE if playing else ft.Icons.PLAY_ARROW,
                        tooltip="Pause audio" if playing else "Play audio",
                        on_click=lambda e: self.session.toggle_playback(card.id),
                    ),
                    ft.IconButton(
                        icon=ft.Icons.STAR if card.starred else ft.Icons.STAR_BORDER,
                        icon_color=DesignTokens.ACCENT_STARRED if card.starred else ft.Colors.WHITE54,
                        tooltip="Unstar card" if card.starred else "Star card",
                        on_click=lambda e: self.session.toggle_starred(card.id),
                    ),
                    ft.IconButton(
                        icon=ft.Icons.CHECK_BOX if card.learned else ft.Icons.CHECK_BOX_OUTLINE_BLANK,
                        icon_color=DesignTokens.ACCENT_LEARNED if card.learned else ft.Colors.WHITE54,
                        tooltip="Mark as not learned" if card.learned else "Mark as learned",
                        on_click=lambda e: self.session.toggle_learned(card.id),
                    ),
                ],
                vertical_alignment=ft.CrossAxisAlignment.CENTER,
                spacing=12,
            ),
            padding=10,
            bgcolor=DesignTokens.BG_CARD,
            border_radius=DesignTokens.RADIUS,
        )

    def refresh(self, snapshot: SessionSnapshot) -> None:
        """Rebuild the list from the latest session state."""
        if snapshot.search_active:
            self._title.value = f"All Cards ({len(snapshot.view)} found)"
        else:
            self._title.value = f"All Cards ({len(snapshot.view)})"

        if snapshot.view:
            self._rows.controls = [self._row(card, snapshot) for card in snapshot.view]
        elif snapshot.search_active:
            self._rows.controls = [ft.Text(f'No birds found matching "{snapshot.query}".',
                                           color=DesignTokens.TEXT_SECONDARY)]
        else:
            self._rows.controls = [ft.Text("No cards to display.", color=DesignTokens.TEXT_SECONDARY)]
