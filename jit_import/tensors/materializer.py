"""Construction of tensor views over deduplicated storage."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import torch

from ..errors import TensorViewError
from ..schema import TensorDescriptor
from ..utils.dtypes import to_torch_dtype
from .storage_map import StorageMap

logger = logging.getLogger(__name__)

__all__ = ["TensorMaterializer"]


def _view_nbytes(
    dims: tuple[int, ...], strides: tuple[int, ...], offset: int, itemsize: int
) -> int:
    """Bytes of storage a strided view reaches, counted from the storage start."""
    if any(d == 0 for d in dims):
        return 0
    last = offset + sum((d - 1) * s for d, s in zip(dims, strides))
    return (last + 1) * itemsize


class TensorMaterializer:
    """Builds tensors from descriptors, sharing storage through a StorageMap."""

    def __init__(self, storage_map: StorageMap) -> None:
        self.storage_map = storage_map

    def materialize(self, tensor_def: TensorDescriptor) -> torch.Tensor:
        """
        Create the tensor view described by ``tensor_def``.

        Args:
            tensor_def: Shape, strides, element offset, dtype and storage reference.

        Returns:
            A tensor aliasing the shared storage of its record.
        """
        storage = self.storage_map.resolve(tensor_def.data)
        dtype = to_torch_dtype(tensor_def.data_type)

        t = torch.empty((0,), dtype=dtype)
        needed = _view_nbytes(
            tensor_def.dims, tensor_def.strides, tensor_def.offset, t.element_size()
        )
        if needed > storage.nbytes():
            raise TensorViewError(
                f"Tensor view {list(tensor_def.dims)} at offset {tensor_def.offset} "
                f"needs {needed} bytes, storage {tensor_def.data.key} "
                f"holds {storage.nbytes()}"
            )

        t.set_(storage, tensor_def.offset, tensor_def.dims, tensor_def.strides)
        if tensor_def.requires_grad:
            t.requires_grad_(True)
        return t

    def materialize_all(self, tensor_defs: Iterable[TensorDescriptor]) -> list[torch.Tensor]:
        """Build the tensor table; position in the result is the tensor id."""
        table = [self.materialize(tensor_def) for tensor_def in tensor_defs]
        logger.debug(
            f"Materialized {len(table)} tensors over {len(self.storage_map)} storages"
        )
        return table
