"""Runtime configuration for protoclone."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any


@dataclass
class CloneConfig:
    """Library-wide settings."""
    private_prefix: str = "_"              # names starting with this are hidden
    copy_deep_mode: str = "none"           # default deep mode for copy()
    copy_parent_depth: float = 0           # ancestors copied along with the object
    copy_mix_parents: bool = False         # flatten copied levels into one object
    mix_preserve_nesting: bool = True      # one delegation hop per mixed level
    seal_default_instances: bool = True    # default constructor seals instances


config = CloneConfig()


def configure(**overrides: Any) -> CloneConfig:
    """Update the active configuration in place.

    Raises:
        ValueError: If an override names an unknown setting.
    """
    known = {f.name for f in fields(CloneConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown configuration keys: {unknown}")
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


def reset_config() -> CloneConfig:
    """Restore every setting to its default."""
    defaults = CloneConfig()
    for f in fields(CloneConfig):
        setattr(config, f.name, getattr(defaults, f.name))
    return config
