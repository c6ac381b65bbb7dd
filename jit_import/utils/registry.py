from __future__ import annotations

import importlib.metadata
import logging
from collections.abc import Callable
from typing import Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Registry(Generic[T]):
    """
    A named registry of components, extendable through package entry points.
    """

    def __init__(self, name: str, entry_point_group: Optional[str] = None) -> None:
        self._name = name
        self._registry: dict[str, type[T]] = {}
        self._entry_point_group = entry_point_group
        self._plugins_loaded = False

    def register(self, name: str | None = None) -> Callable[[type[T]], type[T]]:
        """
        Decorator to register a class.
        """

        def wrapper(cls: type[T]) -> type[T]:
            reg_name = name or cls.__name__
            if reg_name in self._registry:
                logger.warning(
                    f"Replacing '{reg_name}' in registry '{self._name}'"
                )
            self._registry[reg_name] = cls
            return cls

        return wrapper

    def get(self, name: str) -> type[T]:
        """
        Retrieve a class from the registry.
        """
        if not self._plugins_loaded and self._entry_point_group:
            self._load_plugins()

        if name not in self._registry:
            available = ", ".join(sorted(self._registry.keys()))
            raise ValueError(
                f"Unknown component '{name}' in registry '{self._name}'. "
                f"Available components: {available}"
            )
        return self._registry[name]

    def list_available(self) -> list[str]:
        if not self._plugins_loaded and self._entry_point_group:
            self._load_plugins()
        return sorted(self._registry)

    def _load_plugins(self) -> None:
        """Load plugins from entry points."""
        eps = importlib.metadata.entry_points().select(group=self._entry_point_group)
        for ep in eps:
            if ep.name in self._registry:
                continue
            self._registry[ep.name] = ep.load()
            logger.info(f"Loaded plugin '{ep.name}' for registry '{self._name}'")
        self._plugins_loaded = True

    @property
    def registry(self) -> dict[str, type[T]]:
        """
        Get the internal registry dictionary.
        """
        return self._registry


CODE_LOADER_REGISTRY: Registry = Registry(
    "CodeLoader", entry_point_group="jit_import.code_loaders"
)

register_code_loader = CODE_LOADER_REGISTRY.register
