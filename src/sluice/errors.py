"""Exception hierarchy for sluice.

Absence and stream exhaustion are ordinary outcomes and never raise. The
classes below are either fail-fast programmer errors (``ConfigurationError``,
``UnwrapError``) or payloads carried inside ``Failure`` by pipeline stages
(``ParseError``, ``RuleViolationError``).
"""

from __future__ import annotations


class SluiceError(Exception):
    """Base exception for all sluice errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    @property
    def message(self) -> str:
        """The message without the hint."""
        return str(self.args[0]) if self.args else ""

    def __str__(self) -> str:
        """Return the message followed by the hint, when one is set."""
        msg = self.message
        return f"{msg}. {self.hint}" if self.hint else msg


class ConfigurationError(SluiceError):
    """Configuration validation failed or a component was misconfigured."""


class UnwrapError(SluiceError):
    """A value was extracted from an Absent or from the wrong result variant."""


class ParseError(SluiceError):
    """Raw input could not be decomposed into the expected shape."""

    def __init__(self, message: str, *, raw: str, hint: str | None = None) -> None:
        super().__init__(message, hint=hint)
        self.raw = raw

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return (self.message, self.raw) == (other.message, other.raw)

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.raw))


class RuleViolationError(SluiceError):
    """Structurally valid input broke a domain rule."""

    def __init__(
        self, message: str, *, field: str, hint: str | None = None
    ) -> None:
        super().__init__(message, hint=hint)
        self.field = field

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RuleViolationError):
            return NotImplemented
        return (self.message, self.field) == (other.message, other.field)

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.field))
