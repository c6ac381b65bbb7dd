"""
Deduplicating map from container record key to shared tensor storage.

Every tensor that names the same record key resolves to the one storage
object created on first use, so the record is read once and never copied.
"""

from __future__ import annotations

import logging

import torch

from ..container import ContainerReader
from ..errors import StorageSizeMismatchError
from ..schema import RecordRef

logger = logging.getLogger(__name__)

__all__ = ["StorageMap", "storage_from_bytes"]


def storage_from_bytes(data: bytes) -> torch.UntypedStorage:
    """Wrap record bytes in an untyped storage that owns them."""
    if not data:
        return torch.UntypedStorage(0)
    return torch.frombuffer(bytearray(data), dtype=torch.uint8).untyped_storage()


class StorageMap:
    """Keyed cache of shared storages, alive for a single deserialize call."""

    def __init__(self, reader: ContainerReader) -> None:
        self._reader = reader
        self._storages: dict[int, torch.UntypedStorage] = {}

    def resolve(self, ref: RecordRef) -> torch.UntypedStorage:
        """
        Return the shared storage for ``ref.key``, reading the record on first use.

        Raises:
            ArchiveReadError: If the record is absent or truncated.
            StorageSizeMismatchError: If the record size differs from ``ref.size``.
        """
        storage = self._storages.get(ref.key)
        if storage is not None:
            if storage.nbytes() != ref.size:
                raise StorageSizeMismatchError(ref.key, ref.size, storage.nbytes())
            logger.debug(f"Storage {ref.key} reused")
            return storage

        data, size = self._reader.get_record_by_key(ref.key)
        if size != ref.size:
            raise StorageSizeMismatchError(ref.key, ref.size, size)
        storage = storage_from_bytes(data)
        self._storages[ref.key] = storage
        logger.debug(f"Storage {ref.key} loaded ({size} bytes)")
        return storage

    def __len__(self) -> int:
        return len(self._storages)

    def __contains__(self, key: object) -> bool:
        return key in self._storages

    @property
    def nbytes(self) -> int:
        """Total bytes held by the distinct storages."""
        return sum(s.nbytes() for s in self._storages.values())
