"""Parser configuration."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from .errors import ConfigError


DEFAULT_MAX_DEPTH = 32
# Deepest nesting the parser can follow within the default interpreter stack.
MAX_DEPTH_LIMIT = 48


@dataclass(frozen=True)
class ParserConfig:
    """Tunables shared by every parse call.

    ``max_depth`` bounds how deeply JSON containers may nest inside
    ``jsonencode(...)``; anything deeper is a fatal parse error.  It may not
    exceed :data:`MAX_DEPTH_LIMIT`.
    """

    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ConfigError(f"max_depth must be an integer, got {self.max_depth!r}")
        if not 1 <= self.max_depth <= MAX_DEPTH_LIMIT:
            raise ConfigError(
                f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}, "
                f"got {self.max_depth}"
            )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> ParserConfig:
        """Build a config from plain key/value pairs, ignoring ``None`` values."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise ConfigError(f"unknown config option(s): {', '.join(unknown)}")
        return cls(**{k: v for k, v in mapping.items() if v is not None})


DEFAULT_CONFIG = ParserConfig()
