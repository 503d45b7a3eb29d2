"""
BirdCards: Bird Call Flashcards
-------------------------------

A Flet interface over the deck session: study one card at a time or browse
and search the whole catalog.
"""

import sys
from pathlib import Path

# Ensure project root is on sys.path for absolute imports
_ROOT = Path(__file__).resolve().parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import flet as ft
from typing import Dict

from birdcards.config import Config
from birdcards.models import FilterMode, SessionStatus, ViewMode
from birdcards.services import CardLoader, ProgressStore
from birdcards.session import DeckSession
from birdcards.ui import CatalogView, FletAudioPlayer, StudyView
from birdcards.ui.theme import DesignTokens
from birdcards.utils import setup_logger

logger = setup_logger()


class BirdCardsApp:
    """Main application controller."""

    def __init__(self, page: ft.Page) -> None:
        """
        Initialize the application.

        Args:
            page: Flet page instance
        """
        self.page = page
        self._setup_page()

        self.player = FletAudioPlayer(page)
        self.session = DeckSession(progress_store=ProgressStore(), player=self.player)
        self.player.on_ended = self.session.playback_ended
        self.session.on_change(self.render)

        self.study = StudyView(page, self.session)
        self.catalog = CatalogView(page, self.session)
        self._build_ui()

    def _setup_page(self) -> None:
        """Configure page settings and theme."""
        self.page.title = "Bird Call Flashcards"
        self.page.theme_mode = ft.ThemeMode.DARK
        self.page.bgcolor = DesignTokens.BG_PRIMARY
        self.page.padding = 24
        self.page.window.min_width = 520
        self.page.window.min_height = 640

    def _build_ui(self) -> None:
        """Build the main UI layout."""
        self._filter_buttons: Dict[FilterMode, ft.Control] = {
            mode: ft.OutlinedButton(
                mode.value.capitalize(),
                on_click=lambda e, m=mode: self.session.set_filter(m),
            )
            for mode in FilterMode
        }
        self._progress_text = ft.Text("", size=12, color=DesignTokens.TEXT_SECONDARY)
        self._view_toggle = ft.TextButton(
            "View All Cards",
            icon=ft.Icons.LIST,
            on_click=lambda e: self.session.toggle_view_mode(),
        )

        toolbar = ft.Row(
            controls=[
                ft.Icon(ft.Icons.FILTER_LIST, size=16, color=DesignTokens.TEXT_SECONDARY),
                *self._filter_buttons.values(),
                ft.IconButton(
                    icon=ft.Icons.SHUFFLE,
                    tooltip="Shuffle deck",
                    on_click=lambda e: self.session.shuffle(),
                ),
                self._view_toggle,
            ],
            alignment=ft.MainAxisAlignment.CENTER,
            wrap=True,
            spacing=8,
        )

        self.content_area = ft.Container(expand=True)
        self.page.add(
            ft.Column(
                controls=[
                    ft.Row(
                        controls=[
                            ft.Icon(ft.Icons.FLUTTER_DASH, color=ft.Colors.LIGHT_BLUE_200, size=28),
                            ft.Text("Bird Call Flashcards", size=22, weight=ft.FontWeight.BOLD),
                        ],
                        alignment=ft.MainAxisAlignment.CENTER,
                    ),
                    toolbar,
                    self._progress_text,
                    self.content_area,
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                expand=True,
            )
        )

    # =========================================================================
    # RENDER
    # =========================================================================

    def _message(self, text: str, color: str, icon=None) -> ft.Control:
        controls = [ft.Text(text, color=color, text_align=ft.TextAlign.CENTER, selectable=True)]
        if icon is not None:
            controls.insert(0, ft.Icon(icon, color=color, size=32))
        return ft.Container(
            content=ft.Column(
                controls=controls,
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                spacing=8,
            ),
            alignment=ft.Alignment(0, 0),
            padding=20,
        )

    def render(self) -> None:
        """Render whatever state the session exposes."""
        snapshot = self.session.snapshot()

        for mode, button in self._filter_buttons.items():
            button.disabled = mode is snapshot.filter_mode
        self._view_toggle.text = (
            "Study Mode" if snapshot.view_mode is ViewMode.CATALOG else "View All Cards"
        )
        self._progress_text.value = (
            f"{snapshot.learned_count} learned · {snapshot.starred_count} starred"
            f" · {snapshot.collection_size} birds"
        )

        if snapshot.status is SessionStatus.LOADING:
            self.content_area.content = ft.Container(
                content=ft.ProgressRing(), alignment=ft.Alignment(0, 0)
            )
        elif snapshot.status is SessionStatus.ERROR:
            self.content_area.content = self._message(
                snapshot.error or "Could not load bird data.",
                DesignTokens.ACCENT_DANGER,
                ft.Icons.ERROR_OUTLINE,
            )
        elif snapshot.status is SessionStatus.EMPTY:
            self.content_area.content = self._message(
                "No cards available.", DesignTokens.TEXT_SECONDARY, ft.Icons.INFO_OUTLINE
            )
        elif snapshot.view_mode is ViewMode.CATALOG:
            self.catalog.refresh(snapshot)
            self.content_area.content = self.catalog.container
        else:
            self.study.refresh(snapshot)
            self.content_area.content = self.study.container

        self.page.update()

    async def load(self) -> None:
        """Fetch the deck without blocking the UI."""
        async with CardLoader() as loader:
            await self.session.load(loader)


def main(page: ft.Page) -> None:
    """
    Main entry point for Flet application.

    Args:
        page: Flet page instance
    """
    app = BirdCardsApp(page)
    app.render()
    page.run_task(app.load)


if __name__ == "__main__":
    ft.run(main, assets_dir=Config.MEDIA_ROOT)
