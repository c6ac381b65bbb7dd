from .dtypes import DataType, to_torch_dtype
from .registry import CODE_LOADER_REGISTRY, Registry, register_code_loader

__all__ = [
    "CODE_LOADER_REGISTRY",
    "DataType",
    "Registry",
    "register_code_loader",
    "to_torch_dtype",
]
