from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, TypeVar

import yaml

T = TypeVar("T", bound="BaseConfig")

__all__ = ["BaseConfig"]


@dataclass
class BaseConfig:
    """Base configuration class with utility methods."""

    @classmethod
    def from_yaml(cls: type[T], path: str) -> T:
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls: type[T], data: dict[str, Any]) -> T:
        """Create configuration from a dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(
                f"Unknown {cls.__name__} option(s): {', '.join(unknown)}"
            )
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return asdict(self)
