"""Fetchers module - Manifest and mapping retrieval."""

from .base import BaseFetcher
from .json_source import JsonSourceFetcher, is_remote

__all__ = [
    'BaseFetcher',
    'JsonSourceFetcher',
    'is_remote',
]
