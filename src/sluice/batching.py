"""Size-bounded batching over a pull stream.

Boundary policy:
- The first item always opens batch 0.
- Before adding each later item, the open batch is checked: if its
  cumulative size already meets or exceeds capacity, it is closed and the
  incoming item seeds the next batch. Otherwise the item joins the open batch.
- Whatever is open when the stream ends is closed as the final batch.

Fullness is checked before an item is added, never after. A batch can
therefore end above capacity by the size of its last item, and a single
oversized item is accepted into a fresh batch rather than rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

from sluice.errors import ConfigurationError
from sluice.option import ABSENT, Present
from sluice.stream import as_stream

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from sluice.config import Config
    from sluice.option import OptionalValue
    from sluice.stream import PullStream

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Batch[T]:
    """A closed batch: its position in emission order, items, and total size."""

    index: int
    items: tuple[T, ...]
    size: int

    def __len__(self) -> int:
        return len(self.items)


def _require_positive(value: object, name: str) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ConfigurationError(
            f"{name} must be a positive integer, got {value!r}",
            hint="A non-positive limit would close every batch immediately.",
        )


def _measure[T](size_of: Callable[[T], int], item: T) -> int:
    size = size_of(item)
    if size < 0:
        raise ValueError(f"item size must be >= 0, got {size} for {item!r}")
    return size


class BatchAccumulator[T]:
    """Group a stream of items into batches bounded by cumulative size."""

    __slots__ = ("_capacity", "_emitted", "_items", "_size", "_size_of")

    def __init__(self, capacity: int, *, size_of: Callable[[T], int] = len) -> None:
        """Create an accumulator.

        Args:
            capacity: Cumulative size at which the open batch is closed.
            size_of: Measures one item; defaults to ``len``.

        Raises:
            ConfigurationError: If ``capacity`` is not a positive integer.
        """
        _require_positive(capacity, "capacity")
        self._capacity = capacity
        self._size_of = size_of
        self._items: list[T] = []
        self._size = 0
        self._emitted = 0

    @classmethod
    def from_config(
        cls, config: Config, *, size_of: Callable[[T], int] = len
    ) -> BatchAccumulator[T]:
        return cls(config.batch_capacity, size_of=size_of)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def pending(self) -> tuple[T, ...]:
        """Items in the open batch."""
        return tuple(self._items)

    def is_full(self) -> bool:
        return self._size >= self._capacity

    def push(self, item: T) -> OptionalValue[Batch[T]]:
        """Add one item, returning the batch it caused to close, if any."""
        size = _measure(self._size_of, item)
        closed: OptionalValue[Batch[T]] = ABSENT
        if self._items and self.is_full():
            closed = self._close()
        self._items.append(item)
        self._size += size
        return closed

    def flush(self) -> OptionalValue[Batch[T]]:
        """Close the open batch regardless of its size."""
        if not self._items:
            return ABSENT
        return self._close()

    def batches(self, source: PullStream[T] | Iterable[T]) -> Iterator[Batch[T]]:
        """Lazily drive ``source`` through the accumulator.

        The final partial batch is emitted when ``source`` is exhausted.
        """
        for item in as_stream(source):
            match self.push(item):
                case Present(value=batch):
                    yield batch
        match self.flush():
            case Present(value=batch):
                yield batch

    def _close(self) -> Present[Batch[T]]:
        batch = Batch(index=self._emitted, items=tuple(self._items), size=self._size)
        log.debug(
            "batch %d closed at %d/%d (%d item(s))",
            batch.index,
            batch.size,
            self._capacity,
            len(batch),
        )
        self._emitted += 1
        self._items = []
        self._size = 0
        return Present(batch)


def take_until_threshold[T](
    source: PullStream[T],
    threshold: int,
    *,
    size_of: Callable[[T], int],
) -> Batch[T]:
    """Consume items until their running total meets ``threshold``.

    Stops early if ``source`` runs out; unconsumed items stay in the stream.

    Raises:
        ConfigurationError: If ``threshold`` is not a positive integer.
    """
    _require_positive(threshold, "threshold")
    items: list[T] = []
    total = 0
    while total < threshold:
        match source.peek():
            case Present(value=item):
                total += _measure(size_of, item)
                source.advance()
                items.append(item)
            case _:
                break
    return Batch(index=0, items=tuple(items), size=total)


__all__ = ("Batch", "BatchAccumulator", "take_until_threshold")
