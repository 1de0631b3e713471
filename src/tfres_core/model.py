"""Data model for parsed resource blocks and their property values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .values import JsonValue, _Marker


# ---------------------------------------------------------------------------
# Payload-less variants
# ---------------------------------------------------------------------------

class _VNull(_Marker):
    _label = "null"

    def __bool__(self) -> bool:
        return False


class _VEach(_Marker):
    """The ``each.key`` placeholder, resolved per iteration elsewhere."""

    _label = "each.key"


VNull = _VNull()
VEach = _VEach()


# ---------------------------------------------------------------------------
# Property values with a payload
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VBoolean:
    value: bool

    def __str__(self) -> str:
        return str(self.value).lower()


@dataclass(frozen=True)
class VString:
    value: str  # verbatim, escapes are not decoded

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class VJson:
    value: JsonValue

    def __str__(self) -> str:
        return f"jsonencode({self.value})"


@dataclass(frozen=True)
class VSet:
    items: tuple[str, ...] = ()

    def __str__(self) -> str:
        return "toset([" + ", ".join(f'"{s}"' for s in self.items) + "])"


@dataclass(frozen=True)
class VReference:
    """Unresolved pointer to another resource by type and name."""

    res_type: str
    res_name: str

    def __str__(self) -> str:
        return f"{self.res_type}.{self.res_name}"


ResourcePropertyValue = Union[
    _VNull, VBoolean, VString, VJson, VSet, _VEach, VReference
]


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ResourceProperty:
    key: str
    value: ResourcePropertyValue


# Ordered as written; duplicate keys are kept.
ResourceDefinition = tuple[ResourceProperty, ...]


@dataclass(frozen=True)
class Resource:
    res_type: str
    res_name: str
    res_def: ResourceDefinition = ()

    def properties(self, key: str) -> list[ResourcePropertyValue]:
        """All values assigned to *key*, in source order."""
        return [p.value for p in self.res_def if p.key == key]

    def references(self) -> list[VReference]:
        """References made by this resource's properties, in source order."""
        return [p.value for p in self.res_def if isinstance(p.value, VReference)]


@dataclass(frozen=True)
class ParseResult:
    """Success value of :func:`tfres_core.reader.parse_resources`."""

    remainder: str
    resources: tuple[Resource, ...] = ()

    def __iter__(self):
        yield self.remainder
        yield self.resources
