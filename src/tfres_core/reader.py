"""Reader layer: converts resource block text into Resource records."""

from __future__ import annotations

from funcparserlib.parser import many, maybe

from .combinators import (
    Source,
    committed,
    const,
    expecting,
    lit,
    regex,
    run,
    token,
    ws,
)
from .config import ParserConfig
from .json_reader import root as json_root
from .model import (
    ParseResult,
    Resource,
    ResourceProperty,
    ResourcePropertyValue,
    VBoolean,
    VEach,
    VJson,
    VNull,
    VReference,
    VSet,
    VString,
)


# Two segments and a discarded tail; the bare token each.key is left to VEach.
_REFERENCE_RE = (
    r"(?!each\.key(?:[ \t\n\r\f]|\Z))"
    r"([^. \t\n\r\f]*)\.([^. \t\n\r\f]*)[^ \t\n\r\f]*"
)
# A key never runs past the end of its line.
_KEY_RE = r"[^ =\n]*"

RESOURCE_KEYWORD = "resource"


def _make_set(items) -> VSet:
    if items is None:
        return VSet(())
    first, rest = items
    return VSet((first, *rest))


# ---------------------------------------------------------------------------
# Quoted text
# ---------------------------------------------------------------------------

def quoted(label: str):
    """``"..."`` with surrounding whitespace; content is kept verbatim."""
    return ws + -lit('"', label) + committed(
        regex(r'[^"]*', label) + -lit('"', "closing '\"'"), label
    ) + ws


_set_item = quoted("string")


# ---------------------------------------------------------------------------
# Property values, in the order they are tried
# ---------------------------------------------------------------------------

_vjson = ws + -lit("jsonencode(", "jsonencode(...)") + committed(
    json_root + -lit(")", "')'"), "jsonencode"
) + ws >> VJson

_vset = ws + -lit("toset(", "toset(...)") + committed(
    -token("[")
    + maybe(_set_item + many(-token(",") + committed(_set_item)))
    + -token("]", "',' or ']'")
    + -lit(")", "')'"),
    "toset",
) + ws >> _make_set

_vstring = quoted("string") >> VString

_vreference = ws + regex(_REFERENCE_RE, "reference", 1, 2) + ws >> (
    lambda segments: VReference(*segments)
)

_veach = ws + lit("each.key") + ws >> const(VEach)

_vboolean = ws + (
    lit("true") >> const(VBoolean(True)) | lit("false") >> const(VBoolean(False))
) + ws

_vnull = ws + lit("null") + ws >> const(VNull)

# The right-hand side of ``key = value``.
property_value = ws + expecting(
    _vjson | _vset | _vstring | _vreference | _veach | _vboolean | _vnull,
    "a property value",
)


# ---------------------------------------------------------------------------
# Resource blocks
# ---------------------------------------------------------------------------

def _property_body(key: str):
    return committed(property_value, f"property {key}") >> (
        lambda value: ResourceProperty(key, value)
    )


# ``key = value``; the value is mandatory once ``=`` is seen.
resource_property = (
    ws + regex(_KEY_RE, "property key") + -token("=", "'='")
).bind(lambda key: _property_body(key.strip()))


def _resource_body(res_type: str):
    """Everything after the type identifier is mandatory."""
    body = (
        quoted("resource name")
        + -token("{")
        + many(resource_property)
        + -token("}", "a property or '}'")
    )
    return committed(body, f'resource "{res_type}"') >> (
        lambda parts: Resource(res_type, parts[0], tuple(parts[1]))
    )


# ``resource "<type>" "<name>" { ... }`` with surrounding whitespace.
resource = (
    ws + -lit(RESOURCE_KEYWORD, repr(RESOURCE_KEYWORD)) + quoted("resource type")
).bind(_resource_body)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def parse_resources(
    document: str, config: ParserConfig | None = None
) -> ParseResult:
    """Collect the contiguous run of resource blocks starting at the first
    occurrence of ``resource`` in *document*.

    Text before that occurrence is discarded.  Collection stops silently at
    the first text that is not a resource block; that text, and everything
    after it, is returned as the remainder.  A document without the keyword
    yields no resources and is returned whole.

    Raises :class:`~tfres_core.errors.ParseError` when a block fails past
    its type identifier.
    """
    start = document.find(RESOURCE_KEYWORD)
    if start < 0:
        return ParseResult(document, ())
    resources, end = run(many(resource), Source(document, config), "resources", start)
    return ParseResult(document[end:], tuple(resources))


def parse_resource(
    text: str, config: ParserConfig | None = None
) -> tuple[str, Resource]:
    """Parse exactly one resource block at the start of *text*."""
    result, end = run(resource, Source(text, config), "resource")
    return text[end:], result


def parse_property_value(
    text: str, config: ParserConfig | None = None
) -> tuple[str, ResourcePropertyValue]:
    """Parse one property value, as found after a property's ``=``."""
    result, end = run(property_value, Source(text, config), "property value")
    return text[end:], result
