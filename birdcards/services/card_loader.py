"""
Card Loader - builds the initial card collection from the two data sources.

The manifest lists audio filenames; the mapping gives each filename a
display name and an optional image. Cards are only created for filenames
present in both.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional

from ..config import Config
from ..exceptions import DataFetchFailure
from ..fetchers import BaseFetcher, JsonSourceFetcher
from ..models import Card
from ..utils.paths import MediaPathGenerator

logger = logging.getLogger(__name__)


def validate_manifest(manifest: Any, source: str = "manifest") -> List[str]:
    """Check the manifest is a JSON array of strings."""
    if not isinstance(manifest, list) or any(not isinstance(item, str) for item in manifest):
        raise DataFetchFailure(
            f"Invalid manifest format at {source}. Expected an array of strings."
        )
    return manifest


def validate_mapping(mapping: Any, source: str = "mapping") -> Dict[str, Any]:
    """Check the mapping is a JSON object."""
    if not isinstance(mapping, dict):
        raise DataFetchFailure(
            f"Invalid mapping format at {source}. Expected a JSON object."
        )
    return mapping


def build_cards(
    manifest: List[str],
    mapping: Mapping[str, Any],
    audio_dir: Optional[str] = None,
    image_dir: Optional[str] = None,
) -> List[Card]:
    """
    Create Card objects for every manifest entry that has mapping data.

    Duplicate filenames keep their first occurrence. Filenames without a
    mapping entry are skipped with a warning, never filled with placeholders.

    Args:
        manifest: Audio filenames
        mapping: Filename -> {"displayName": str, "image": str | None}
                 (no "image" key: derived from the audio filename)
        audio_dir: Audio directory prefix (defaults to Config.AUDIO_DIR)
        image_dir: Image directory prefix (defaults to Config.IMAGE_DIR)

    Returns:
        Cards in manifest order, all flags False
    """
    cards: List[Card] = []
    seen = set()

    for audio_filename in manifest:
        if audio_filename in seen:
            logger.warning("Duplicate manifest entry: %s. Skipping card.", audio_filename)
            continue
        seen.add(audio_filename)

        bird = mapping.get(audio_filename)
        if not isinstance(bird, dict):
            logger.warning("No mapping found for audio file: %s. Skipping card.", audio_filename)
            continue

        display_name = bird.get("displayName")
        if not isinstance(display_name, str) or not display_name.strip():
            display_name = Config.UNKNOWN_BIRD

        if "image" in bird:
            image = bird["image"]
            image_ref = MediaPathGenerator.image_src(image if isinstance(image, str) else None, image_dir)
        else:
            image_ref = MediaPathGenerator.image_from_audio(audio_filename, image_dir)

        cards.append(Card(
            id=audio_filename,
            audio_ref=MediaPathGenerator.audio_src(audio_filename, audio_dir),
            display_name=display_name,
            image_ref=image_ref,
        ))

    logger.info("Successfully created %d cards.", len(cards))
    return cards


def apply_progress(cards: List[Card], progress: Mapping[str, Mapping[str, Any]]) -> List[Card]:
    """
    Overlay stored learned/starred flags onto freshly built cards.

    Cards without a stored entry keep both flags False.
    """
    merged = []
    for card in cards:
        flags = progress.get(card.id) or {}
        merged.append(replace(
            card,
            learned=bool(flags.get("learned", False)),
            starred=bool(flags.get("starred", False)),
        ))
    return merged


def _describe_failure(error: DataFetchFailure, manifest_url: str, mapping_url: str) -> str:
    """Turn a fetch failure into the message shown to the learner."""
    message = f"Could not load bird data. {error}"
    if "404" in message:
        message += f"\nEnsure '{manifest_url}' and '{mapping_url}' exist."
    elif "Invalid JSON" in message:
        message += "\nCheck if the manifest and mapping files contain valid JSON."
    elif "Invalid encoding" in message:
        message += "\nCheck that the manifest and mapping files are saved as UTF-8."
    return message


class CardLoader:
    """
    Loads the initial, unordered card collection.

    Usage:
        async with CardLoader() as loader:
            cards = await loader.load()
    """

    def __init__(
        self,
        manifest_url: Optional[str] = None,
        mapping_url: Optional[str] = None,
        fetcher: Optional[BaseFetcher] = None,
    ):
        """
        Initialize card loader.

        Args:
            manifest_url: Manifest location (defaults to Config.MANIFEST_URL)
            mapping_url: Mapping location (defaults to Config.MAPPING_URL)
            fetcher: Fetcher used for both documents (defaults to JsonSourceFetcher)
        """
        self.manifest_url = manifest_url or Config.MANIFEST_URL
        self.mapping_url = mapping_url or Config.MAPPING_URL
        self._fetcher = fetcher or JsonSourceFetcher()

    async def close(self) -> None:
        await self._fetcher.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def load(self) -> List[Card]:
        """
        Fetch manifest and mapping concurrently and build the cards.

        Raises:
            DataFetchFailure: with a learner-facing message if either source
                fails or has the wrong shape. No partial collection is returned.
        """
        try:
            manifest, mapping = await asyncio.gather(
                self._fetcher.fetch(self.manifest_url),
                self._fetcher.fetch(self.mapping_url),
            )
            audio_filenames = validate_manifest(manifest, self.manifest_url)
            bird_mapping = validate_mapping(mapping, self.mapping_url)
        except DataFetchFailure as e:
            logger.error("Error fetching or processing data: %s", e)
            raise DataFetchFailure(_describe_failure(e, self.manifest_url, self.mapping_url)) from e

        logger.info("Loaded %d audio file names from manifest.", len(audio_filenames))
        logger.info("Loaded mapping for %d birds.", len(bird_mapping))
        return build_cards(audio_filenames, bird_mapping)
