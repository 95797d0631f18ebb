"""Result Monad for Explicit Error Flow.

``Success`` and ``Failure`` make fallibility part of the data instead of a
``try``/``except`` around every stage. Chaining short-circuits: once a stage
yields ``Failure(e)``, later ``map``/``chain``/``ensure`` functions are never
invoked and ``e`` reaches the caller unchanged.
"""

from __future__ import annotations

import dataclasses
import typing
from typing import TYPE_CHECKING, Any, Never

from sluice.errors import UnwrapError
from sluice.option import ABSENT, Absent, Present

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure")


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A successful outcome."""

    value: TSuccess

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    def map[U](self, f: Callable[[TSuccess], U]) -> Success[U]:
        return Success(f(self.value))

    def map_error(self, f: Callable[[Any], Any]) -> Success[TSuccess]:  # noqa: ARG002
        return self

    def chain[U, E](
        self, f: Callable[[TSuccess], FallibleResult[U, E]]
    ) -> FallibleResult[U, E]:
        """Feed the value to the next fallible stage."""
        return f(self.value)

    and_then = chain

    def alternative(self, f: Callable[[Any], Any]) -> Success[TSuccess]:  # noqa: ARG002
        return self

    or_else = alternative

    def ensure[E](
        self,
        predicate: Callable[[TSuccess], bool],
        error_factory: Callable[[TSuccess], E],
    ) -> FallibleResult[TSuccess, E]:
        """Turn a value that fails ``predicate`` into ``Failure(error_factory(v))``."""
        if predicate(self.value):
            return self
        return Failure(error_factory(self.value))

    def unwrap_or(self, default: TSuccess) -> TSuccess:  # noqa: ARG002
        return self.value

    def unwrap_or_else(self, f: Callable[[Any], TSuccess]) -> TSuccess:  # noqa: ARG002
        return self.value

    def zip[U, E](
        self, other: FallibleResult[U, E]
    ) -> FallibleResult[tuple[TSuccess, U], E]:
        match other:
            case Success(value=v):
                return Success((self.value, v))
            case _:
                return other

    def ok(self) -> Present[TSuccess]:
        return Present(self.value)

    def err(self) -> Absent:
        return ABSENT

    def unwrap(self) -> TSuccess:
        return self.value

    def unwrap_error(self) -> Never:
        raise UnwrapError(f"called unwrap_error() on Success({self.value!r})")


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """A failed outcome carrying its error payload."""

    error: TFailure

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    def map(self, f: Callable[[Any], Any]) -> Failure[TFailure]:  # noqa: ARG002
        return self

    def map_error[F](self, f: Callable[[TFailure], F]) -> Failure[F]:
        return Failure(f(self.error))

    def chain(self, f: Callable[[Any], Any]) -> Failure[TFailure]:  # noqa: ARG002
        return self

    and_then = chain

    def alternative[T, F](
        self, f: Callable[[TFailure], FallibleResult[T, F]]
    ) -> FallibleResult[T, F]:
        """Recover by handing the error to ``f``."""
        return f(self.error)

    or_else = alternative

    def ensure(
        self,
        predicate: Callable[[Any], bool],  # noqa: ARG002
        error_factory: Callable[[Any], Any],  # noqa: ARG002
    ) -> Failure[TFailure]:
        return self

    def unwrap_or[T](self, default: T) -> T:
        return default

    def unwrap_or_else[T](self, f: Callable[[TFailure], T]) -> T:
        """Compute the fallback from the error."""
        return f(self.error)

    def zip(self, other: FallibleResult[Any, Any]) -> Failure[TFailure]:  # noqa: ARG002
        return self

    def ok(self) -> Absent:
        return ABSENT

    def err(self) -> Present[TFailure]:
        return Present(self.error)

    def unwrap(self) -> Never:
        raise UnwrapError(
            f"called unwrap() on Failure({self.error!r})",
            hint="Inspect .error or use unwrap_or_else() to handle the failure",
        )

    def unwrap_error(self) -> TFailure:
        return self.error


FallibleResult = Success[TSuccess] | Failure[TFailure]


# --- Adapters ---


def attempt[T](
    fn: Callable[..., T],
    *args: Any,
    catch: tuple[type[Exception], ...] = (Exception,),
) -> FallibleResult[T, Exception]:
    """Call ``fn(*args)`` and capture a raised ``catch`` exception as a Failure.

    Exceptions outside ``catch`` propagate.
    """
    try:
        return Success(fn(*args))
    except catch as e:
        return Failure(e)


def collect[T, E](
    results: Iterable[FallibleResult[T, E]],
) -> FallibleResult[list[T], E]:
    """Gather values until the first Failure, which is returned as-is.

    ``results`` is consumed lazily; nothing after the first Failure is pulled.
    """
    values: list[T] = []
    for result in results:
        match result:
            case Success(value=v):
                values.append(v)
            case Failure():
                return result
    return Success(values)


def partition[T, E](results: Iterable[FallibleResult[T, E]]) -> tuple[list[T], list[E]]:
    """Split results into ``(values, errors)``, each in input order."""
    values: list[T] = []
    errors: list[E] = []
    for result in results:
        match result:
            case Success(value=v):
                values.append(v)
            case Failure(error=e):
                errors.append(e)
    return values, errors


__all__ = (
    "Failure",
    "FallibleResult",
    "Success",
    "attempt",
    "collect",
    "partition",
)
