"""Parsing primitives over raw source text, built on funcparserlib.

Parsers run directly on the source string, one character per token.  A
parser either

- returns a value and the state after what it consumed,
- raises :class:`~funcparserlib.parser.NoParseError` (recoverable: ``|``,
  ``maybe`` and ``many`` fall back to the next alternative), or
- raises :class:`~tfres_core.errors.ParseError` (fatal: the parser had
  committed, so no sibling alternative is tried).

funcparserlib only ever catches ``NoParseError``, so a ``ParseError``
raised below a :func:`committed` point unwinds straight to the caller.
"""

from __future__ import annotations

import re
from typing import Any, Callable

from funcparserlib.parser import NoParseError, Parser, State, skip

from .config import DEFAULT_CONFIG, ParserConfig
from .errors import ParseError


class Source(str):
    """The text being parsed, carrying the settings of one parse call."""

    def __new__(cls, text: str, config: ParserConfig | None = None) -> Source:
        self = super().__new__(cls, text)
        self.config = config or DEFAULT_CONFIG
        self.depth = 0
        self.innermost = 0
        return self


def _advance(s: State, pos: int) -> State:
    return State(pos, max(pos, s.max), s.parser)


def _mismatch(s: State, expected: str) -> NoParseError:
    return NoParseError(f"expected {expected}", State(s.pos, s.max, s.parser))


def _fatal(tokens: str, exc: NoParseError, contexts: tuple[str, ...]) -> ParseError:
    return ParseError(exc.msg, str(tokens), exc.state.pos, contexts)


# ---------------------------------------------------------------------------
# Terminals
# ---------------------------------------------------------------------------

def lit(text: str, expected: str | None = None) -> Parser:
    """Exactly *text*."""
    expected = expected or repr(text)

    def _lit(tokens, s):
        if not tokens.startswith(text, s.pos):
            raise _mismatch(s, expected)
        return text, _advance(s, s.pos + len(text))

    return Parser(_lit).named(expected)


def regex(pattern: str, expected: str, *groups: int) -> Parser:
    """The match of *pattern* at the cursor: the whole match, or *groups*."""
    compiled = re.compile(pattern)

    def _regex(tokens, s):
        m = compiled.match(tokens, s.pos)
        if m is None:
            raise _mismatch(s, expected)
        return m.group(*groups), _advance(s, m.end())

    return Parser(_regex).named(expected)


# Spaces, tabs, carriage returns and newlines; a form feed is not whitespace.
ws = skip(regex(r"[ \t\r\n]*", "whitespace"))


def token(text: str, expected: str | None = None) -> Parser:
    """*text* surrounded by optional whitespace."""
    return ws + lit(text, expected) + ws


def const(value: Any) -> Callable[[Any], Any]:
    return lambda _: value


# ---------------------------------------------------------------------------
# Cut points and labels
# ---------------------------------------------------------------------------

def committed(p: Parser, label: str | None = None) -> Parser:
    """Cut point: any mismatch inside *p* becomes fatal.

    Fatal errors passing through gain *label*, if given, as their new
    outermost context.
    """
    contexts = (label,) if label else ()

    def _committed(tokens, s):
        try:
            return p.run(tokens, s)
        except NoParseError as exc:
            raise _fatal(tokens, exc, contexts) from None
        except ParseError as exc:
            if label is None:
                raise
            raise exc.with_context(label) from None

    return Parser(_committed).named(label or p.name)


def expecting(p: Parser, expected: str) -> Parser:
    """*p*, reporting any mismatch as "expected <expected>" where it started."""

    def _expecting(tokens, s):
        try:
            return p.run(tokens, s)
        except NoParseError:
            raise _mismatch(s, expected) from None

    return Parser(_expecting).named(expected)


def nested(p: Parser) -> Parser:
    """One level of container nesting, bounded by ``config.max_depth``."""

    def _nested(tokens, s):
        limit = tokens.config.max_depth
        if tokens.depth >= limit:
            raise ParseError(
                f"nesting deeper than {limit} levels", str(tokens), s.pos, ("depth",)
            )
        tokens.depth += 1
        tokens.innermost = s.pos
        try:
            return p.run(tokens, s)
        finally:
            tokens.depth -= 1

    return Parser(_nested).named(p.name)


# ---------------------------------------------------------------------------
# Running
# ---------------------------------------------------------------------------

def run(p: Parser, source: Source, label: str, start: int = 0) -> tuple[Any, int]:
    """Apply *p* at *start*; return its value and the position after it.

    A mismatch is reported as a non-fatal :class:`ParseError` labelled
    *label*.  Input nested deeper than the interpreter stack can follow is
    reported as a fatal ``depth`` error.
    """
    try:
        value, s = p.run(source, State(start, start, None))
    except NoParseError as exc:
        raise ParseError(
            exc.msg, str(source), exc.state.pos, (label,), fatal=False
        ) from None
    except RecursionError:
        raise ParseError(
            "nesting too deep to parse", str(source), source.innermost, ("depth",)
        ) from None
    return value, s.pos
