"""
Media path generation utilities - Single source of truth for media locators.

Every audio/image locator the loader or the UI needs is built here so the
naming conventions live in one place.
"""

import urllib.parse
from typing import Optional

from ..config import Config


class MediaPathGenerator:
    """
    Centralized media locator generator.

    Locators are relative to the media root (e.g. "/audio/Common_Blackbird.mp3"),
    which Flet serves as its assets directory.
    """

    # Image files derived from audio filenames are assumed to be JPEGs
    IMAGE_EXT = ".jpg"

    @classmethod
    def audio_src(cls, audio_filename: str, audio_dir: Optional[str] = None) -> str:
        """
        Build the audio locator for a manifest entry.

        Args:
            audio_filename: Filename from the manifest
            audio_dir: Audio directory (defaults to Config.AUDIO_DIR)

        Returns:
            Locator like "/audio/Common_Blackbird.mp3"
        """
        return f"{audio_dir or Config.AUDIO_DIR}{audio_filename}"

    @classmethod
    def image_src(cls, image_filename: Optional[str], image_dir: Optional[str] = None) -> Optional[str]:
        """
        Build the image locator for a mapping entry.

        Returns None when the mapping has no image, which is a valid card.
        """
        if not image_filename:
            return None
        return f"{image_dir or Config.IMAGE_DIR}{image_filename}"

    @classmethod
    def image_from_audio(cls, audio_filename: Optional[str], image_dir: Optional[str] = None) -> Optional[str]:
        """
        Derive an image locator from an audio filename.

        "Common_Blackbird.mp3" -> "/bird_images/Common_Blackbird.jpg"
        """
        if not audio_filename:
            return None
        stem, dot, _ = audio_filename.rpartition(".")
        basename = stem if dot and stem else audio_filename
        return f"{image_dir or Config.IMAGE_DIR}{basename}{cls.IMAGE_EXT}"

    @classmethod
    def wikipedia_search_url(cls, display_name: str) -> str:
        """Wikipedia search link for a bird's display name."""
        query = urllib.parse.urlencode({"search": display_name})
        return f"{Config.WIKIPEDIA_SEARCH_URL}?{query}"
