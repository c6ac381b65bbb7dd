"""Module tree reconstruction and the default host module model."""

from .builder import ModuleTreeBuilder
from .code_loaders import RawCodeLoader, SourceCodeLoader
from .protocols import CodeLoader, ModuleFactory, ModuleHandle, ModuleLookup
from .script_module import ScriptModule, TreeModuleFactory

__all__ = [
    "CodeLoader",
    "ModuleFactory",
    "ModuleHandle",
    "ModuleLookup",
    "ModuleTreeBuilder",
    "RawCodeLoader",
    "ScriptModule",
    "SourceCodeLoader",
    "TreeModuleFactory",
]
