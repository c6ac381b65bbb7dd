"""Keyed record container access."""

from .format import FIELD_ALIGNMENT, FILE_MAGIC
from .reader import ContainerReader

__all__ = ["FIELD_ALIGNMENT", "FILE_MAGIC", "ContainerReader"]
