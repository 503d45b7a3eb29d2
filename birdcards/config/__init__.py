"""Configuration module for BirdCards."""

from .settings import Config

__all__ = ['Config']
