"""Metadata descriptors and the JSON transcoder."""

from .descriptors import (
    ModelDescriptor,
    ModuleDescriptor,
    ParameterDescriptor,
    RecordRef,
    TensorDescriptor,
)
from .transcoder import transcode_metadata

__all__ = [
    "ModelDescriptor",
    "ModuleDescriptor",
    "ParameterDescriptor",
    "RecordRef",
    "TensorDescriptor",
    "transcode_metadata",
]
