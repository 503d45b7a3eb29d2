"""Utils module."""

from .paths import MediaPathGenerator
from .logger import setup_logger

__all__ = [
    'MediaPathGenerator',
    'setup_logger'
]
