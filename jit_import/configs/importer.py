"""
Importer Configuration.

Limits and defaults applied while reading a model archive.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .base import BaseConfig

__all__ = ["ImportConfig"]


@dataclass
class ImportConfig(BaseConfig):
    """Configuration for archive imports.

    Attributes:
        max_file_format_version: Newest container format version accepted.
        max_proto_version: Newest metadata document version accepted.
        code_loader: Registered code loader used by ``load``.
        log_level: Level applied to the package logger by the CLI.
    """

    max_file_format_version: int = 1
    max_proto_version: int = 1
    code_loader: str = "source"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.max_file_format_version < 1:
            raise ValueError("max_file_format_version must be >= 1")
        if self.max_proto_version < 1:
            raise ValueError("max_proto_version must be >= 1")

    @classmethod
    def from_env(cls) -> "ImportConfig":
        """Create config from environment variables."""
        return cls(
            max_file_format_version=int(
                os.getenv("JIT_IMPORT_MAX_FILE_FORMAT_VERSION", "1")
            ),
            max_proto_version=int(os.getenv("JIT_IMPORT_MAX_PROTO_VERSION", "1")),
            code_loader=os.getenv("JIT_IMPORT_CODE_LOADER", "source"),
            log_level=os.getenv("JIT_IMPORT_LOG_LEVEL", "WARNING"),
        )
