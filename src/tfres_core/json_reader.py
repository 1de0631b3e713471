"""JSON reader: decodes the argument of ``jsonencode(...)`` into JSON values."""

from __future__ import annotations

from funcparserlib.parser import forward_decl, many, maybe

from .combinators import (
    Source,
    committed,
    const,
    expecting,
    lit,
    nested,
    regex,
    run,
    token,
    ws,
)
from .config import ParserConfig
from .values import JArray, JBool, JNull, JNum, JObject, JStr, JsonValue


_ESCAPES = {'"': '"', "\\": "\\", "n": "\n"}


def _make_array(values) -> JArray:
    if values is None:
        return JArray(())
    first, rest = values
    return JArray((first, *rest))


def _make_object(values) -> JObject:
    # Last duplicate key wins.
    if values is None:
        return JObject({})
    first, rest = values
    entries = dict([first])
    entries.update(rest)
    return JObject(entries)


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

_escape = -lit("\\") + committed(
    regex(r'["\\n]', "one of the escapes \\\" \\\\ \\n") >> _ESCAPES.get
)

# A double-quoted string; \", \\ and \n are decoded.
string = -lit('"', "string") + committed(
    many(regex(r'[^"\\]+', "string characters") | _escape)
    + -lit('"', "closing '\"'"),
    "string",
) >> "".join

_number = regex(
    r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", "number"
) >> (lambda text: JNum(float(text)))

_true = lit("true") >> const(JBool(True))
_false = lit("false") >> const(JBool(False))
_null = lit("null") >> const(JNull)


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------

value = forward_decl().named("a JSON value")

_member = ws + string + -committed(token(":", "':'")) + value >> tuple

_object = -lit("{", "map") + committed(
    nested(
        maybe(_member + many(-token(",") + committed(_member)))
        + -token("}", "',' or '}'")
    ),
    "map",
) >> _make_object

_array = -lit("[", "array") + committed(
    nested(
        maybe(value + many(-token(",") + committed(value)))
        + -token("]", "',' or ']'")
    ),
    "array",
) >> _make_array

# Containers sit two alternations deep whatever their position, so each
# nesting level costs the same number of stack frames.
_container = _object | _array
_scalar = string >> JStr | _number | _true | _false | _null

value.define(ws + expecting(_container | _scalar, "a JSON value"))

# A root document: one object, array or null, with surrounding whitespace.
root = ws + expecting(_container | _null, "an object, array or null") + ws


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def parse_json(
    text: str, config: ParserConfig | None = None
) -> tuple[str, JsonValue]:
    """Parse a JSON root document from the start of *text*.

    Returns the unconsumed text and the decoded value.  Raises
    :class:`~tfres_core.errors.ParseError`; ``fatal`` is False when *text*
    simply does not start with an object, array or ``null``.
    """
    source = Source(text, config)
    result, end = run(root, source, "json")
    return text[end:], result
