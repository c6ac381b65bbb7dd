"""
Strongly-typed descriptors for the archive metadata document.

The models parse JSON directly and fail closed: unknown fields, missing
required fields and type mismatches are all rejected. Field names are accepted
in snake_case and in the lowerCamelCase form of the protobuf JSON mapping, and
64-bit integers may be given as JSON numbers or decimal strings.
"""

from __future__ import annotations

import re
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainValidator,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from ..utils.dtypes import DataType, to_torch_dtype

__all__ = [
    "ModelDescriptor",
    "ModuleDescriptor",
    "ParameterDescriptor",
    "RecordRef",
    "TensorDescriptor",
]

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1

_DECIMAL = re.compile(r"-?[0-9]+")


def _int_from_decimal_string(value: Any) -> Any:
    if isinstance(value, str):
        if not _DECIMAL.fullmatch(value):
            raise ValueError(f"'{value}' is not a decimal integer")
        return int(value)
    return value


def _parse_data_type(value: Any) -> DataType:
    if isinstance(value, DataType):
        return value
    if isinstance(value, str):
        try:
            return DataType[value]
        except KeyError:
            raise ValueError(f"Unknown data type '{value}'") from None
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return DataType(value)
        except ValueError:
            raise ValueError(f"Unknown data type code {value}") from None
    raise ValueError(f"Data type must be a name or a code, got {type(value).__name__}")


Int64 = Annotated[
    int, BeforeValidator(_int_from_decimal_string), Field(ge=INT64_MIN, le=INT64_MAX)
]
NonNegativeInt64 = Annotated[
    int, BeforeValidator(_int_from_decimal_string), Field(ge=0, le=INT64_MAX)
]
UInt64 = Annotated[
    int, BeforeValidator(_int_from_decimal_string), Field(ge=0, le=UINT64_MAX)
]
DataTypeField = Annotated[DataType, PlainValidator(_parse_data_type)]


class _Descriptor(BaseModel):
    model_config = ConfigDict(
        strict=True,
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class RecordRef(_Descriptor):
    """Reference to a container record and the byte size it must have."""

    key: UInt64
    size: UInt64


class ParameterDescriptor(_Descriptor):
    name: str
    tensor_id: Int64
    is_buffer: bool = False


class TensorDescriptor(_Descriptor):
    """A strided view over a storage record; ``offset`` counts elements."""

    dims: tuple[NonNegativeInt64, ...]
    strides: tuple[NonNegativeInt64, ...]
    offset: NonNegativeInt64 = 0
    data_type: DataTypeField
    requires_grad: bool = False
    data: RecordRef

    @field_validator("data_type")
    @classmethod
    def validate_tensor_type(cls, v: DataType) -> DataType:
        """Reject element types that cannot back a tensor."""
        to_torch_dtype(v)
        return v

    @model_validator(mode="after")
    def validate_rank(self) -> "TensorDescriptor":
        if len(self.strides) != len(self.dims):
            raise ValueError(
                f"Tensor has {len(self.dims)} dims but {len(self.strides)} strides"
            )
        return self


class ModuleDescriptor(_Descriptor):
    """One node of the module tree; child order is significant."""

    name: str
    optimize: bool = False
    submodules: tuple[ModuleDescriptor, ...] = ()
    parameters: tuple[ParameterDescriptor, ...] = ()
    torchscript_arena: RecordRef


class ModelDescriptor(_Descriptor):
    """Root of the metadata document: the module tree plus the tensor table."""

    proto_version: Int64 = 1
    producer_name: str = ""
    producer_version: str = ""
    main_module: ModuleDescriptor
    tensors: tuple[TensorDescriptor, ...] = ()

    @property
    def root_module(self) -> ModuleDescriptor:
        return self.main_module
