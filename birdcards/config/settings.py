"""Global settings and configuration."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load from project root
_env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(_env_path)


def _env_bool(key: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes", "on")


def _env_int(key: str, default: int) -> int:
    """Read an integer from the environment, falling back on bad values."""
    try:
        return int(os.environ.get(key, default))
    except ValueError:
        return default


@dataclass
class Config:
    """Application-wide configuration."""

    # Cross-platform paths using pathlib
    # BASE_DIR is the project root (parent of birdcards/)
    BASE_DIR: Path = Path(__file__).parent.parent.parent.resolve()

    # Media locations (relative to the media root served to the UI)
    AUDIO_DIR: str = os.environ.get("AUDIO_DIR", "/audio/")
    IMAGE_DIR: str = os.environ.get("IMAGE_DIR", "/bird_images/")
    MEDIA_ROOT: str = os.environ.get("MEDIA_ROOT", str(BASE_DIR / "public"))

    # Data sources: http(s) URLs or local file paths
    MANIFEST_URL: str = os.environ.get(
        "MANIFEST_URL", str(BASE_DIR / "public" / "audio" / "manifest.json")
    )
    MAPPING_URL: str = os.environ.get(
        "MAPPING_URL", str(BASE_DIR / "public" / "data" / "bird_mapping.json")
    )

    # Learner progress
    DATA_DIR: str = os.environ.get("DATA_DIR", str(BASE_DIR / "data"))
    PROGRESS_FILE: str = os.environ.get(
        "PROGRESS_FILE", str(Path(DATA_DIR) / "progress.json")
    )

    # Network
    TIMEOUT: int = _env_int("TIMEOUT", 30)

    # Study behaviour
    AUTOPLAY: bool = _env_bool("AUTOPLAY", True)
    SEARCH_SCORE_CUTOFF: int = _env_int("SEARCH_SCORE_CUTOFF", 70)

    # Logging
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
    LOG_DIR: str = os.environ.get("LOG_DIR", "")

    WIKIPEDIA_SEARCH_URL: str = "https://en.wikipedia.org/w/index.php"
    UNKNOWN_BIRD: str = "Unknown Bird"
