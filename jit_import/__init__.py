"""
Model archive importer.

Reads a keyed record container whose last record is a JSON description of a
module tree, and rebuilds that tree with tensors sharing deduplicated storage.
"""

from . import configs, container, errors, modules, schema, tensors, utils
from .configs import ImportConfig
from .errors import (
    ArchiveError,
    ArchiveOpenError,
    ArchiveReadError,
    CodeArenaSizeMismatchError,
    InvalidTensorIdError,
    MetadataTranscodeError,
    ParameterBindingError,
    SchemaValidationError,
    StorageSizeMismatchError,
    TensorViewError,
)
from .importer import ScriptModuleDeserializer, import_module, load
from .modules import ModuleFactory, ScriptModule, TreeModuleFactory

__version__ = "0.1.0"

__all__ = [
    "ArchiveError",
    "ArchiveOpenError",
    "ArchiveReadError",
    "CodeArenaSizeMismatchError",
    "ImportConfig",
    "InvalidTensorIdError",
    "MetadataTranscodeError",
    "ModuleFactory",
    "ParameterBindingError",
    "SchemaValidationError",
    "ScriptModule",
    "ScriptModuleDeserializer",
    "StorageSizeMismatchError",
    "TensorViewError",
    "TreeModuleFactory",
    "configs",
    "container",
    "errors",
    "import_module",
    "load",
    "modules",
    "schema",
    "tensors",
    "utils",
]
