"""Optional values: explicit presence/absence with a combinator algebra.

``Present`` and ``Absent`` are immutable; every combinator returns a new
value. Each variant implements the full algebra itself, so callers never
branch on truthiness or ``None``. ``Slot`` is the single mutable holder and
supports the ownership-transfer operations ``take`` and ``replace``.
"""

from __future__ import annotations

import dataclasses
import typing
from typing import TYPE_CHECKING, Any, Never

from sluice.errors import UnwrapError

if TYPE_CHECKING:
    from collections.abc import Callable

    from sluice.result import FallibleResult

T = typing.TypeVar("T")


@dataclasses.dataclass(frozen=True, slots=True)
class Present[T]:
    """A value that is there."""

    value: T

    @property
    def is_present(self) -> bool:
        return True

    @property
    def is_absent(self) -> bool:
        return False

    def map[U](self, f: Callable[[T], U]) -> Present[U]:
        """Apply ``f`` to the contained value."""
        return Present(f(self.value))

    def chain[U](self, f: Callable[[T], OptionalValue[U]]) -> OptionalValue[U]:
        """Hand the value to a function that may itself come up empty."""
        return f(self.value)

    and_then = chain

    def alternative(
        self, f: Callable[[], OptionalValue[T]]  # noqa: ARG002
    ) -> Present[T]:
        return self

    or_else = alternative

    def filter(self, predicate: Callable[[T], bool]) -> OptionalValue[T]:
        """Keep the value only when ``predicate`` holds."""
        return self if predicate(self.value) else ABSENT

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        return self.value

    def unwrap_or_else(self, f: Callable[[], T]) -> T:  # noqa: ARG002
        return self.value

    def zip[U](self, other: OptionalValue[U]) -> OptionalValue[tuple[T, U]]:
        """Pair with another optional; absent if ``other`` is absent."""
        match other:
            case Present(value=v):
                return Present((self.value, v))
            case _:
                return ABSENT

    def unwrap(self) -> T:
        return self.value

    def expect(self, message: str) -> T:  # noqa: ARG002
        return self.value

    def ok_or[E](self, error: E) -> FallibleResult[T, E]:  # noqa: ARG002
        from sluice.result import Success

        return Success(self.value)

    def ok_or_else[E](self, f: Callable[[], E]) -> FallibleResult[T, E]:  # noqa: ARG002
        from sluice.result import Success

        return Success(self.value)


@dataclasses.dataclass(frozen=True, slots=True)
class Absent:
    """No value. All instances are equal; prefer the ``ABSENT`` constant."""

    def __repr__(self) -> str:
        return "Absent"

    @property
    def is_present(self) -> bool:
        return False

    @property
    def is_absent(self) -> bool:
        return True

    def map(self, f: Callable[[Any], Any]) -> Absent:  # noqa: ARG002
        return self

    def chain(self, f: Callable[[Any], OptionalValue[Any]]) -> Absent:  # noqa: ARG002
        return self

    and_then = chain

    def alternative[T](self, f: Callable[[], OptionalValue[T]]) -> OptionalValue[T]:
        """Fall back to ``f()``, evaluated only now."""
        return f()

    or_else = alternative

    def filter(self, predicate: Callable[[Any], bool]) -> Absent:  # noqa: ARG002
        return self

    def unwrap_or[T](self, default: T) -> T:
        return default

    def unwrap_or_else[T](self, f: Callable[[], T]) -> T:
        return f()

    def zip(self, other: OptionalValue[Any]) -> Absent:  # noqa: ARG002
        return self

    def unwrap(self) -> Never:
        raise UnwrapError(
            "called unwrap() on an Absent value",
            hint="Use unwrap_or()/unwrap_or_else() when absence is expected",
        )

    def expect(self, message: str) -> Never:
        raise UnwrapError(message)

    def ok_or[E](self, error: E) -> FallibleResult[Any, E]:
        from sluice.result import Failure

        return Failure(error)

    def ok_or_else[E](self, f: Callable[[], E]) -> FallibleResult[Any, E]:
        from sluice.result import Failure

        return Failure(f())


ABSENT = Absent()

OptionalValue = Present[T] | Absent


def optional(value: T | None) -> OptionalValue[T]:
    """Lift a nullable value: ``None`` becomes ``ABSENT``."""
    return ABSENT if value is None else Present(value)


class Slot[T]:
    """A mutable cell holding an optional value.

    The combinators above never mutate; a slot is where ownership moves in
    and out explicitly.
    """

    __slots__ = ("_content",)

    def __init__(self, content: OptionalValue[T] = ABSENT) -> None:
        self._content: OptionalValue[T] = content

    def __repr__(self) -> str:
        return f"Slot({self._content!r})"

    @property
    def is_empty(self) -> bool:
        return self._content.is_absent

    def get(self) -> OptionalValue[T]:
        """Return the current content without moving it."""
        return self._content

    def take(self) -> OptionalValue[T]:
        """Move the content out, leaving the slot empty."""
        content, self._content = self._content, ABSENT
        return content

    def replace(self, value: T) -> OptionalValue[T]:
        """Store ``value`` and return whatever was there before."""
        previous, self._content = self._content, Present(value)
        return previous


__all__ = ("ABSENT", "Absent", "OptionalValue", "Present", "Slot", "optional")
