"""Run-length grouping over a pull stream.

Consecutive equal elements collapse into ``Run(value, count)``. Runs keep the
input relative order and their counts sum to the number of elements read.
Equality is plain ``==``.
"""

from __future__ import annotations

from itertools import repeat
from typing import TYPE_CHECKING, Any, NamedTuple

from sluice.option import Present
from sluice.stream import as_stream

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from sluice.stream import PullStream


class Run(NamedTuple):
    """A value and how many times it repeated in a row."""

    value: Any
    count: int


class RunLengthScanner[T]:
    """Lazily group consecutive equal elements of a stream.

    The scanner borrows the stream for one pass; iterating it a second time
    yields nothing new because the stream is already consumed.
    """

    __slots__ = ("_stream",)

    def __init__(self, source: PullStream[T] | Iterable[T]) -> None:
        self._stream = as_stream(source)

    def __iter__(self) -> Iterator[Run]:
        stream = self._stream
        while True:
            match stream.advance():
                case Present(value=current):
                    count = 1
                    while stream.advance_if(lambda nxt: nxt == current).is_present:  # noqa: B023
                        count += 1
                    yield Run(current, count)
                case _:
                    return


def run_lengths[T](source: PullStream[T] | Iterable[T]) -> list[Run]:
    """Collect all runs of ``source``."""
    return list(RunLengthScanner(source))


def expand(runs: Iterable[tuple[Any, int]]) -> Iterator[Any]:
    """Lazily turn ``(value, count)`` pairs back into the flat sequence."""
    for value, count in runs:
        yield from repeat(value, count)


__all__ = ("Run", "RunLengthScanner", "expand", "run_lengths")
