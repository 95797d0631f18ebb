"""Pull-based lazy stream with one-element lookahead.

``PullStream`` hands out elements on demand through ``advance`` and lets a
consumer look at the next element through ``peek`` without consuming it. At
most one element is buffered; when the buffer is occupied it always holds
exactly what the next ``advance`` returns.

A stream is a single forward pass owned by one consumer. Exhaustion is
terminal: once the backing sequence runs out, every ``advance``/``peek``
returns ``ABSENT`` and the backing iterator is released.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sluice.option import ABSENT, Present, Slot

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from sluice.option import OptionalValue

log = logging.getLogger(__name__)


class PullStream[T]:
    """Cursor over a finite or unbounded sequence, with single-step lookahead."""

    __slots__ = ("_exhausted", "_lookahead", "_position", "_source")

    def __init__(self, source: Iterable[T]) -> None:
        """Wrap any iterable; it is iterated lazily and at most once."""
        self._source: Iterator[T] = iter(source)
        self._lookahead: Slot[T] = Slot()
        self._position = 0
        self._exhausted = False

    def __repr__(self) -> str:
        state = "exhausted" if self._exhausted else "open"
        return (
            f"PullStream(position={self._position}, "
            f"lookahead={self._lookahead.get()!r}, {state})"
        )

    # --- Constructors ---

    @classmethod
    def from_fetch(cls, fetch: Callable[[], OptionalValue[T]]) -> PullStream[T]:
        """Stream from a producer that returns ``ABSENT`` once it runs dry.

        ``fetch`` is not called again after it first returns ``ABSENT``.
        """

        def pull() -> Iterator[T]:
            while True:
                match fetch():
                    case Present(value=v):
                        yield v
                    case _:
                        return

        return cls(pull())

    @classmethod
    def draining(cls, stack: list[T]) -> PullStream[T]:
        """Pop from the end of ``stack`` until it is empty (LIFO).

        Items are popped only as they are pulled, so stopping early leaves
        the rest on the list. The stream takes over the list while in use.
        """

        def pull() -> Iterator[T]:
            while stack:
                yield stack.pop()

        return cls(pull())

    @classmethod
    def successors(
        cls, first: OptionalValue[T], step: Callable[[T], OptionalValue[T]]
    ) -> PullStream[T]:
        """Follow ``step`` from ``first`` until it yields ``ABSENT``."""

        def pull() -> Iterator[T]:
            current = first
            while True:
                match current:
                    case Present(value=v):
                        yield v
                        current = step(v)
                    case _:
                        return

        return cls(pull())

    # --- Core operations ---

    @property
    def position(self) -> int:
        """Number of elements handed out by ``advance`` so far."""
        return self._position

    @property
    def is_exhausted(self) -> bool:
        """True once the backing sequence has run out and nothing is buffered."""
        return self._exhausted and self._lookahead.is_empty

    def advance(self) -> OptionalValue[T]:
        """Consume and return the next element, or ``ABSENT`` at the end."""
        item = self._lookahead.take()
        if item.is_absent:
            item = self._pull()
        if item.is_present:
            self._position += 1
        return item

    def peek(self) -> OptionalValue[T]:
        """Return the next element without consuming it.

        Repeated calls without an intervening ``advance`` return the same
        value and pull from the backing sequence at most once.
        """
        if self._lookahead.is_empty:
            pulled = self._pull()
            if pulled.is_absent:
                return ABSENT
            self._lookahead.replace(pulled.unwrap())
        return self._lookahead.get()

    def advance_if(self, predicate: Callable[[T], bool]) -> OptionalValue[T]:
        """Consume the next element only when it satisfies ``predicate``."""
        if self.peek().filter(predicate).is_present:
            return self.advance()
        return ABSENT

    def has_next(self) -> bool:
        return self.peek().is_present

    def take_while(self, predicate: Callable[[T], bool]) -> Iterator[T]:
        """Lazily consume elements while ``predicate`` holds.

        The first element that fails ``predicate`` stays in the stream.
        """
        while True:
            match self.advance_if(predicate):
                case Present(value=v):
                    yield v
                case _:
                    return

    def _pull(self) -> OptionalValue[T]:
        if self._exhausted:
            return ABSENT
        try:
            return Present(next(self._source))
        except StopIteration:
            self._exhausted = True
            self._source = iter(())
            log.debug("stream exhausted after %d element(s)", self._position)
            return ABSENT

    # --- Iterator protocol ---

    def __iter__(self) -> PullStream[T]:
        return self

    def __next__(self) -> T:
        match self.advance():
            case Present(value=v):
                return v
            case _:
                raise StopIteration


def as_stream[T](source: PullStream[T] | Iterable[T]) -> PullStream[T]:
    """Return ``source`` unchanged if it is already a stream, else wrap it."""
    return source if isinstance(source, PullStream) else PullStream(source)


__all__ = ("PullStream", "as_stream")
