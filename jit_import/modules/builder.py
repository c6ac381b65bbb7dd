"""
Recursive reconstruction of the module tree.

Traversal is depth-first and pre-order with siblings visited in declaration
order. The lookup callback may have side effects, so the order is part of the
contract. Parameters are bound before the code arena is handed over because
the code may refer to them.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import torch

from ..container import ContainerReader
from ..errors import (
    CodeArenaSizeMismatchError,
    InvalidTensorIdError,
    ParameterBindingError,
)
from ..schema import ModuleDescriptor
from .protocols import CodeLoader, ModuleLookup

logger = logging.getLogger(__name__)

__all__ = ["ModuleTreeBuilder"]


class ModuleTreeBuilder:
    """Binds descriptors onto host modules obtained from a lookup callback."""

    def __init__(
        self,
        reader: ContainerReader,
        module_lookup: ModuleLookup,
        code_loader: CodeLoader,
        tensor_table: Sequence[torch.Tensor],
    ) -> None:
        self._reader = reader
        self._module_lookup = module_lookup
        self._code_loader = code_loader
        # Bound parameters replace their table entries so code sees the module's own objects.
        self._tensor_table: list[torch.Tensor] = list(tensor_table)
        self._path: list[str] = []

    def build(self, module_def: ModuleDescriptor) -> None:
        """Rebuild ``module_def`` and its subtree at the current path."""
        module = self._module_lookup(tuple(self._path))
        module.set_optimized(module_def.optimize)
        logger.debug(f"Building module '{'.'.join(self._path) or '<root>'}'")

        for sub_def in module_def.submodules:
            self._path.append(sub_def.name)
            try:
                self.build(sub_def)
            finally:
                self._path.pop()

        for param_def in module_def.parameters:
            if not 0 <= param_def.tensor_id < len(self._tensor_table):
                raise InvalidTensorIdError(
                    f"Parameter '{param_def.name}' references tensor "
                    f"{param_def.tensor_id}, table has {len(self._tensor_table)}"
                )
            try:
                bound = module.register_parameter(
                    param_def.name,
                    self._tensor_table[param_def.tensor_id],
                    param_def.is_buffer,
                )
            except KeyError as e:
                raise ParameterBindingError(
                    f"Cannot bind '{param_def.name}' on module "
                    f"'{'.'.join(self._path) or '<root>'}': {e}"
                ) from e
            if bound is not None:
                self._tensor_table[param_def.tensor_id] = bound

        arena = module_def.torchscript_arena
        data, size = self._reader.get_record_by_key(arena.key)
        if size != arena.size:
            raise CodeArenaSizeMismatchError(arena.key, arena.size, size)
        self._code_loader(module, data, self._tensor_table)
