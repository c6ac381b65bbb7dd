"""Configuration dataclasses for the archive importer."""

from .base import BaseConfig
from .importer import ImportConfig

__all__ = ["BaseConfig", "ImportConfig"]
