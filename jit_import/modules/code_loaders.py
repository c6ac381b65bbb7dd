"""Code loaders that attach a module's code arena to the module."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import torch

from ..utils.registry import register_code_loader
from .script_module import ScriptModule

logger = logging.getLogger(__name__)

__all__ = ["RawCodeLoader", "SourceCodeLoader"]


@register_code_loader("source")
class SourceCodeLoader:
    """Decodes the arena as UTF-8 TorchScript source and hands it to ``module.set_code``."""

    def __call__(
        self, module: ScriptModule, data: bytes, tensor_table: Sequence[torch.Tensor]
    ) -> None:
        try:
            source = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValueError("Code arena is not UTF-8 encoded source") from e
        module.set_code(source)
        logger.debug(f"Attached {len(source)} characters of source")


@register_code_loader("raw")
class RawCodeLoader:
    """Hands the arena bytes untouched to ``module.set_code_arena``."""

    def __call__(
        self, module: ScriptModule, data: bytes, tensor_table: Sequence[torch.Tensor]
    ) -> None:
        module.set_code_arena(data)
