"""Element type codes stored in tensor descriptors and their torch dtypes."""

from __future__ import annotations

from enum import IntEnum

import torch

__all__ = ["DataType", "to_torch_dtype"]


class DataType(IntEnum):
    """Element type codes, numbered as in the caffe2 ``TensorProto.DataType``."""

    UNDEFINED = 0
    FLOAT = 1
    INT32 = 2
    BYTE = 3
    STRING = 4
    BOOL = 5
    UINT8 = 6
    INT8 = 7
    UINT16 = 8
    INT16 = 9
    INT64 = 10
    FLOAT16 = 12
    DOUBLE = 13
    ZERO_COLLAPSED_FLOAT = 14


_TORCH_DTYPES: dict[DataType, torch.dtype] = {
    DataType.FLOAT: torch.float32,
    DataType.INT32: torch.int32,
    DataType.BYTE: torch.uint8,
    DataType.BOOL: torch.bool,
    DataType.UINT8: torch.uint8,
    DataType.INT8: torch.int8,
    DataType.INT16: torch.int16,
    DataType.INT64: torch.int64,
    DataType.FLOAT16: torch.float16,
    DataType.DOUBLE: torch.float64,
}
if hasattr(torch, "uint16"):
    _TORCH_DTYPES[DataType.UINT16] = torch.uint16


def to_torch_dtype(data_type: DataType) -> torch.dtype:
    """
    Resolve a descriptor element type to a torch dtype.

    Raises:
        ValueError: If the element type has no tensor equivalent.
    """
    try:
        return _TORCH_DTYPES[data_type]
    except KeyError:
        raise ValueError(f"Data type {data_type.name} has no tensor equivalent") from None

