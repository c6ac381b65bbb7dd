"""
Deserializer facade and public entry points.

A load reads the trailing metadata record, materializes the tensor table over
deduplicated storage and then rebuilds the module tree. It either completes or
raises; a tree left behind by a failed load must be discarded.
"""

from __future__ import annotations

import logging
import os
from typing import BinaryIO

from .configs import ImportConfig
from .container import ContainerReader
from .modules import (
    CodeLoader,
    ModuleFactory,
    ModuleLookup,
    ModuleTreeBuilder,
    ScriptModule,
    TreeModuleFactory,
)
from .schema import transcode_metadata
from .tensors import StorageMap, TensorMaterializer
from .utils.registry import CODE_LOADER_REGISTRY

logger = logging.getLogger(__name__)

__all__ = ["ScriptModuleDeserializer", "import_module", "load"]

ArchiveSource = str | os.PathLike[str] | BinaryIO


class ScriptModuleDeserializer:
    """Loads one archive into a module tree supplied by the caller."""

    def __init__(self, reader: ContainerReader, config: ImportConfig | None = None) -> None:
        self.reader = reader
        self.config = config or ImportConfig()

    @classmethod
    def from_path(
        cls, path: str | os.PathLike[str], config: ImportConfig | None = None
    ) -> "ScriptModuleDeserializer":
        config = config or ImportConfig()
        return cls(ContainerReader.open(path, config.max_file_format_version), config)

    @classmethod
    def from_stream(
        cls, stream: BinaryIO, config: ImportConfig | None = None
    ) -> "ScriptModuleDeserializer":
        """Read from ``stream``; the caller keeps ownership of it."""
        config = config or ImportConfig()
        return cls(ContainerReader(stream, config.max_file_format_version), config)

    def close(self) -> None:
        self.reader.close()

    def __enter__(self) -> "ScriptModuleDeserializer":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def deserialize(
        self, module_lookup: ModuleLookup, code_loader: CodeLoader | None = None
    ) -> None:
        """
        Populate the tree reachable from ``module_lookup``.

        Args:
            module_lookup: Maps a path of module names to a module handle.
            code_loader: Receives each module's code arena. Defaults to the
                loader named by ``config.code_loader``.
        """
        if code_loader is None:
            code_loader = CODE_LOADER_REGISTRY.get(self.config.code_loader)()

        data, _ = self.reader.get_last_record()
        model_def = transcode_metadata(data, self.config.max_proto_version)

        storage_map = StorageMap(self.reader)
        tensor_table = TensorMaterializer(storage_map).materialize_all(model_def.tensors)

        ModuleTreeBuilder(self.reader, module_lookup, code_loader, tensor_table).build(
            model_def.root_module
        )
        logger.info(
            f"Loaded archive: {len(tensor_table)} tensors, "
            f"{len(storage_map)} storages ({storage_map.nbytes} bytes)"
        )


def _open(source: ArchiveSource, config: ImportConfig) -> ScriptModuleDeserializer:
    if isinstance(source, (str, os.PathLike)):
        return ScriptModuleDeserializer.from_path(source, config)
    return ScriptModuleDeserializer.from_stream(source, config)


def import_module(
    module_lookup: ModuleLookup | ModuleFactory,
    source: ArchiveSource,
    code_loader: CodeLoader | None = None,
    config: ImportConfig | None = None,
) -> None:
    """
    Load an archive into an externally owned module tree.

    Args:
        module_lookup: A ModuleFactory or a callable mapping paths to modules.
        source: Archive path or an open binary stream.
        code_loader: Consumer of each module's code arena.
        config: Import limits; defaults to ``ImportConfig()``.
    """
    config = config or ImportConfig()
    if isinstance(module_lookup, ModuleFactory):
        module_lookup = module_lookup.get_or_create
    with _open(source, config) as deserializer:
        deserializer.deserialize(module_lookup, code_loader)


def load(source: ArchiveSource, config: ImportConfig | None = None) -> ScriptModule:
    """Load an archive into a fresh ScriptModule tree and return its root."""
    factory = TreeModuleFactory()
    import_module(factory, source, config=config)
    return factory.root
