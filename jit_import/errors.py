"""
Exceptions raised while importing a model archive.

Every error is fatal to the in-progress load. Nothing is retried and the
partially built module tree must be discarded by the caller.
"""

from __future__ import annotations

__all__ = [
    "ArchiveError",
    "ArchiveOpenError",
    "ArchiveReadError",
    "CodeArenaSizeMismatchError",
    "InvalidTensorIdError",
    "MetadataTranscodeError",
    "ParameterBindingError",
    "SchemaValidationError",
    "StorageSizeMismatchError",
    "TensorViewError",
]


class ArchiveError(RuntimeError):
    """Base class for all archive import failures."""


class ArchiveOpenError(ArchiveError, OSError):
    """Raised when the archive path cannot be opened for reading."""


class ArchiveReadError(ArchiveError):
    """Raised when a record is missing, truncated or the container is corrupt."""


class MetadataTranscodeError(ArchiveError):
    """Raised when the metadata record is not valid JSON text."""


class SchemaValidationError(ArchiveError):
    """Raised when the metadata document does not match the descriptor schema."""


class StorageSizeMismatchError(ArchiveError):
    """Raised when a storage record differs in size from its declared size."""

    def __init__(self, key: int, expected: int, actual: int) -> None:
        super().__init__(
            f"Storage record {key} has {actual} bytes, metadata declares {expected}"
        )
        self.key = key
        self.expected = expected
        self.actual = actual


class CodeArenaSizeMismatchError(ArchiveError):
    """Raised when a code arena record differs in size from its declared size."""

    def __init__(self, key: int, expected: int, actual: int) -> None:
        super().__init__(
            f"Code arena record {key} has {actual} bytes, metadata declares {expected}"
        )
        self.key = key
        self.expected = expected
        self.actual = actual


class InvalidTensorIdError(ArchiveError, IndexError):
    """Raised when a parameter references a tensor outside the tensor table."""


class ParameterBindingError(ArchiveError):
    """Raised when the host module refuses a parameter or buffer name."""


class TensorViewError(ArchiveError):
    """Raised when a tensor view does not fit inside its storage."""
