"""JSON value types decoded from ``jsonencode(...)`` literals."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Union


class _Marker:
    """Base for singleton values that carry no payload."""

    _instances: dict[type, "_Marker"] = {}
    _label = ""

    def __new__(cls) -> "_Marker":
        if cls not in _Marker._instances:
            _Marker._instances[cls] = super().__new__(cls)
        return _Marker._instances[cls]

    def __repr__(self) -> str:
        return type(self).__name__.lstrip("_")

    def __str__(self) -> str:
        return self._label


@dataclass(frozen=True)
class JStr:
    value: str

    def __str__(self) -> str:
        return '"' + self.value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n") + '"'


@dataclass(frozen=True)
class JNum:
    value: float

    def __str__(self) -> str:
        v = self.value
        if math.isfinite(v) and v.is_integer():
            return str(int(v))
        return str(v)


@dataclass(frozen=True)
class JBool:
    value: bool

    def __str__(self) -> str:
        return str(self.value).lower()


@dataclass(frozen=True)
class JArray:
    items: tuple["JsonValue", ...] = ()

    def __str__(self) -> str:
        return "[" + ", ".join(str(v) for v in self.items) + "]"


@dataclass(frozen=True)
class JObject:
    # Read-only view; order is first-insertion order of each key.
    entries: Mapping[str, "JsonValue"] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __hash__(self) -> int:
        return hash(frozenset(self.entries.items()))

    def __str__(self) -> str:
        inner = ", ".join(f"{JStr(k)}: {v}" for k, v in self.entries.items())
        return "{" + inner + "}"


class _JNull(_Marker):
    """The JSON ``null`` literal."""

    _label = "null"

    def __bool__(self) -> bool:
        return False


JNull = _JNull()

JsonValue = Union[JStr, JNum, JBool, JArray, JObject, _JNull]
