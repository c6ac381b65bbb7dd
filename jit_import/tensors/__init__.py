"""Shared storage resolution and tensor materialization."""

from .materializer import TensorMaterializer
from .storage_map import StorageMap, storage_from_bytes

__all__ = ["StorageMap", "TensorMaterializer", "storage_from_bytes"]
