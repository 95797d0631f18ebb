"""Three-stage fallible record pipeline: parse, validate, format.

``ValidationPipeline.evaluate`` composes the stages as
``parse(raw).chain(validate).map(format)`` and keeps the failure cause.
``ValidationPipeline.run`` collapses that result to a single string, so parse
and validation failures both become the same fallback message there.

The person stages below are the stock instantiation: records of the form
``"name, age, email"`` with an optional email.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
import logging
from typing import TYPE_CHECKING, Any

from sluice.config import Config
from sluice.errors import ParseError, RuleViolationError, SluiceError
from sluice.option import ABSENT, optional
from sluice.result import Failure, Success

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from sluice.option import OptionalValue
    from sluice.result import FallibleResult

log = logging.getLogger(__name__)

_PERSON_FIELDS = 3
_MAX_AGE = 2**32 - 1


class ValidationPipeline[R, E]:
    """Compose ``parse -> validate -> format`` with a fallback message.

    The pipeline holds no per-call state; records built during a call belong
    to that call only.
    """

    __slots__ = ("_fallback", "_format", "_parse", "_validate")

    def __init__(
        self,
        parse: Callable[[str], FallibleResult[R, E]],
        validate: Callable[[R], FallibleResult[R, E]],
        format: Callable[[R], str],  # noqa: A002
        *,
        fallback: str | Callable[[E], str],
    ) -> None:
        self._parse = parse
        self._validate = validate
        self._format = format
        self._fallback = fallback

    @classmethod
    def for_people(
        cls, config: Config | None = None
    ) -> ValidationPipeline[Person, SluiceError]:
        """Build the person pipeline from ``config`` (defaults when omitted)."""
        cfg = config or Config()
        return cls(
            partial(parse_person, separator=cfg.field_separator),
            partial(validate_person, min_age=cfg.min_age),
            format_person,
            fallback=cfg.fallback_message,
        )

    def evaluate(self, raw: str) -> FallibleResult[str, E]:
        """Run all stages and return the result before it is collapsed.

        Use this when the caller needs to tell failure causes apart.
        """
        return self._parse(raw).chain(self._validate).map(self._format)

    def run(self, raw: str) -> str:
        """Return the formatted record, or the fallback message on any failure."""
        return self.evaluate(raw).unwrap_or_else(partial(self._fallback_for, raw))

    __call__ = run

    def run_all(self, raws: Iterable[str]) -> Iterator[str]:
        """Lazily ``run`` each input in order."""
        for raw in raws:
            yield self.run(raw)

    def _fallback_for(self, raw: str, error: E) -> str:
        log.debug("record %r fell back: %s", raw, error)
        if callable(self._fallback):
            return self._fallback(error)
        return self._fallback


# --- Person stages ---


@dataclass(frozen=True, slots=True)
class Person:
    """A parsed person record."""

    name: str
    age: int
    email: OptionalValue[str] = ABSENT


def _parse_age(text: str, raw: str) -> FallibleResult[int, ParseError]:
    def not_an_age(_: Any) -> ParseError:
        return ParseError(f"age {text!r} is not a non-negative integer", raw=raw)

    # ASCII digits with an optional leading "+", at most 2**32 - 1.
    return (
        Success(text.removeprefix("+"))
        .ensure(lambda digits: digits.isascii() and digits.isdigit(), not_an_age)
        .map(int)
        .ensure(lambda age: age <= _MAX_AGE, not_an_age)
    )


def parse_person(
    raw: str, *, separator: str = ","
) -> FallibleResult[Person, ParseError]:
    """Split ``raw`` into exactly three fields: name, age, email.

    Surrounding whitespace is stripped from each field; an empty email field
    means no email.
    """
    parts = [part.strip() for part in raw.split(separator)]
    if len(parts) != _PERSON_FIELDS:
        return Failure(
            ParseError(
                f"expected {_PERSON_FIELDS} fields, got {len(parts)}",
                raw=raw,
                hint=f"Use 'name{separator} age{separator} email'",
            )
        )
    name, age_text, email = parts
    return _parse_age(age_text, raw).map(
        lambda age: Person(name=name, age=age, email=optional(email or None))
    )


def _is_plausible_email(email: str) -> bool:
    return "@" in email and "." in email


def validate_person(
    person: Person, *, min_age: int = 18, check_email: bool = False
) -> FallibleResult[Person, RuleViolationError]:
    """Check for a non-empty name and the minimum age.

    With ``check_email``, a given email must also contain ``@`` and ``.``.
    """
    checked = (
        Success(person)
        .ensure(
            lambda p: bool(p.name),
            lambda _: RuleViolationError("name must not be empty", field="name"),
        )
        .ensure(
            lambda p: p.age >= min_age,
            lambda p: RuleViolationError(
                f"age {p.age} is below the minimum of {min_age}", field="age"
            ),
        )
    )
    if not check_email:
        return checked
    return checked.ensure(
        lambda p: p.email.filter(lambda e: not _is_plausible_email(e)).is_absent,
        lambda p: RuleViolationError(
            f"email {p.email.unwrap()!r} is not a valid address", field="email"
        ),
    )


def format_person(person: Person) -> str:
    """Render as ``"Name (age) - email"``, or ``"Name (age)"`` without email."""
    base = f"{person.name} ({person.age})"
    return person.email.map(lambda email: f"{base} - {email}").unwrap_or(base)


__all__ = (
    "Person",
    "ValidationPipeline",
    "format_person",
    "parse_person",
    "validate_person",
)
