"""Capabilities the importer needs from the host object model."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable

import torch

__all__ = ["CodeLoader", "ModuleFactory", "ModuleHandle", "ModuleLookup"]


class ModuleHandle(Protocol):
    """A host module the importer mutates but never creates or destroys."""

    def set_optimized(self, flag: bool) -> None: ...

    def register_parameter(
        self, name: str, tensor: torch.Tensor, is_buffer: bool = False
    ) -> torch.Tensor | None:
        """Bind ``tensor`` under ``name``.

        Returns the object the module now holds, or ``None`` if it holds
        ``tensor`` itself. The importer substitutes a returned object into the
        tensor table passed to the code loader.
        """
        ...



@runtime_checkable
class ModuleFactory(Protocol):
    """Returns the module at a path, creating it if absent.

    Repeated calls with the same path during one load must return the same
    handle. The root module lives at the empty path.
    """

    def get_or_create(self, path: Sequence[str]) -> ModuleHandle: ...


ModuleLookup = Callable[[Sequence[str]], ModuleHandle]

CodeLoader = Callable[[ModuleHandle, bytes, Sequence[torch.Tensor]], None]
