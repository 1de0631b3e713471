"""Exception hierarchy for tfres-core."""

from __future__ import annotations


class TfResCoreError(Exception):
    """Base class for every error raised by tfres-core."""


class ConfigError(TfResCoreError):
    """Invalid parser configuration."""


class ParseError(TfResCoreError):
    """A parse failure at *position* in *text*.

    ``contexts`` lists the grammar-rule labels that were active when the
    failure unwound, outermost first.  ``fatal`` is False only for a
    top-level mismatch reported by :func:`parse_json`.
    """

    def __init__(
        self,
        message: str,
        text: str,
        position: int,
        contexts: tuple[str, ...] = (),
        fatal: bool = True,
    ) -> None:
        self.message = message
        self.text = text
        self.position = position
        self.contexts = contexts
        self.fatal = fatal
        super().__init__(self._render())

    @property
    def line(self) -> int:
        return self.text.count("\n", 0, self.position) + 1

    @property
    def column(self) -> int:
        return self.position - (self.text.rfind("\n", 0, self.position) + 1) + 1

    def with_context(self, label: str) -> ParseError:
        """Return a copy with *label* pushed as the new outermost context."""
        return ParseError(
            self.message, self.text, self.position, (label, *self.contexts), self.fatal
        )

    def _render(self) -> str:
        where = f"line {self.line}, column {self.column}"
        if self.contexts:
            return f"{self.message} at {where} (in {' > '.join(self.contexts)})"
        return f"{self.message} at {where}"
