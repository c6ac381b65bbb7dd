"""
Default host object model for ``load``: a tree of ``torch.nn.Module`` nodes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import torch
from torch import nn

__all__ = ["ScriptModule", "TreeModuleFactory"]


class ScriptModule(nn.Module):
    """Module rebuilt from an archive.

    Parameters share storage with the archive tensors they were bound from.
    Import state (the optimize flag and whatever the code loader attached) is
    kept in ``_import_state`` so that archive parameters, buffers and children
    may use any name, including ``code`` or ``optimized``.
    """

    def __init__(self) -> None:
        super().__init__()
        self._import_state: dict[str, Any] = {
            "optimized": False,
            "code": None,
            "code_arena": None,
        }

    def set_optimized(self, flag: bool) -> None:
        self._import_state["optimized"] = flag

    def is_optimized(self) -> bool:
        return bool(self._import_state["optimized"])

    def set_code(self, source: str) -> None:
        self._import_state["code"] = source

    def get_code(self) -> str | None:
        return self._import_state["code"]

    def set_code_arena(self, data: bytes) -> None:
        self._import_state["code_arena"] = data

    def get_code_arena(self) -> bytes | None:
        return self._import_state["code_arena"]

    def register_parameter(
        self,
        name: str,
        param: torch.Tensor | None,
        is_buffer: bool = False,
    ) -> torch.Tensor | None:
        """
        Register ``param`` as a trainable parameter, or as a buffer if ``is_buffer``.

        Returns:
            The tensor object the module now holds under ``name``. For
            parameters this is the ``nn.Parameter`` wrapping ``param``.
        """
        if is_buffer:
            self.register_buffer(name, param)
            return param
        if param is not None and not isinstance(param, nn.Parameter):
            param = nn.Parameter(param, requires_grad=param.requires_grad)
        super().register_parameter(name, param)
        return param

    def find_module(self, name: str) -> "ScriptModule | None":
        return self._modules.get(name)


class TreeModuleFactory:
    """Creates ``ScriptModule`` children on first visit of a path."""

    def __init__(self, root: ScriptModule | None = None) -> None:
        self.root = root if root is not None else ScriptModule()

    def get_or_create(self, path: Sequence[str]) -> ScriptModule:
        curr = self.root
        for name in path:
            child = curr.find_module(name)
            if child is None:
                child = ScriptModule()
                curr.add_module(name, child)
            curr = child
        return curr

    __call__ = get_or_create
