"""UI components for BirdCards."""

from .audio import FletAudioPlayer
from .catalog_view import CatalogView
from .study_view import StudyView

__all__ = [
    'FletAudioPlayer',
    'CatalogView',
    'StudyView',
]
