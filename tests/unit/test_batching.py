"""Unit tests for the batch accumulator boundary policy."""

from __future__ import annotations

import logging

import pytest

from sluice import (
    ABSENT,
    Batch,
    BatchAccumulator,
    Config,
    ConfigurationError,
    Present,
    PullStream,
    take_until_threshold,
)

pytestmark = pytest.mark.unit

ITEMS = [
    "item1",
    "item2_longer",
    "item3",
    "item4_very_long_string",
    "item5",
    "item6_medium",
    "item7",
]


class TestBoundaryPolicy:
    def test_item_sizes_fixture(self):
        assert [len(item) for item in ITEMS] == [5, 12, 5, 22, 5, 12, 5]

    def test_fullness_checked_before_adding(self):
        batches = list(BatchAccumulator(30).batches(ITEMS))

        assert [b.items for b in batches] == [
            ("item1", "item2_longer", "item3", "item4_very_long_string"),
            ("item5", "item6_medium", "item7"),
        ]
        assert [b.size for b in batches] == [44, 22]
        assert [b.index for b in batches] == [0, 1]

    def test_batches_only_exceed_capacity_through_last_item(self):
        for batch in BatchAccumulator(30).batches(ITEMS):
            before_last = batch.size - len(batch.items[-1])
            assert before_last < 30

    def test_concatenated_batches_reproduce_input(self):
        batches = BatchAccumulator(30).batches(PullStream(ITEMS))
        assert [item for b in batches for item in b.items] == ITEMS

    def test_exact_fill_closes_before_next_item(self):
        batches = list(BatchAccumulator(10).batches(["aaaaa", "bbbbb", "c"]))
        assert [b.items for b in batches] == [("aaaaa", "bbbbb"), ("c",)]

    def test_oversized_item_accepted_into_fresh_batch(self):
        batches = list(BatchAccumulator(3).batches(["a", "bbbbbbbb", "c"]))
        assert [b.items for b in batches] == [("a", "bbbbbbbb"), ("c",)]

    def test_oversized_first_item(self):
        batches = list(BatchAccumulator(3).batches(["bbbbbbbb", "c"]))
        assert [b.items for b in batches] == [("bbbbbbbb",), ("c",)]

    def test_empty_stream_emits_nothing(self):
        assert list(BatchAccumulator(5).batches([])) == []

    def test_custom_size_function(self):
        acc = BatchAccumulator(10, size_of=lambda n: n)
        assert [b.items for b in acc.batches([4, 4, 4, 1])] == [(4, 4, 4), (1,)]


class TestIncrementalApi:
    def test_push_returns_closed_batch(self):
        acc = BatchAccumulator(4)
        assert acc.push("abcd") == ABSENT
        assert acc.is_full()
        closed = acc.push("e")
        assert closed == Present(Batch(index=0, items=("abcd",), size=4))
        assert acc.pending == ("e",)

    def test_flush_emits_partial_batch_once(self):
        acc = BatchAccumulator(100)
        acc.push("ab")
        assert acc.flush() == Present(Batch(index=0, items=("ab",), size=2))
        assert acc.flush() == ABSENT
        assert acc.pending == ()

    def test_emitted_batches_are_immutable(self):
        acc = BatchAccumulator(1)
        acc.push("a")
        batch = acc.flush().unwrap()
        with pytest.raises(AttributeError):
            batch.items = ()  # type: ignore[misc]

    def test_negative_size_rejected(self):
        acc = BatchAccumulator(10, size_of=lambda n: n)
        with pytest.raises(ValueError, match="item size must be >= 0"):
            acc.push(-1)

    def test_batch_emission_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="sluice.batching"):
            list(BatchAccumulator(30).batches(ITEMS))
        assert "batch 0 closed at 44/30 (4 item(s))" in caplog.text


class TestConfiguration:
    @pytest.mark.parametrize("capacity", [0, -5, True, 2.5, "30"])
    def test_invalid_capacity_fails_fast(self, capacity):
        with pytest.raises(ConfigurationError) as exc:
            BatchAccumulator(capacity)
        assert exc.value.hint

    def test_from_config(self):
        acc = BatchAccumulator.from_config(Config(batch_capacity=12))
        assert acc.capacity == 12


class TestTakeUntilThreshold:
    def test_stops_once_running_total_meets_threshold(self):
        stream = PullStream([10, 20, 30, 40, 50])
        batch = take_until_threshold(stream, 60, size_of=lambda n: n)
        assert batch.items == (10, 20, 30)
        assert batch.size == 60
        assert stream.advance() == Present(40)

    def test_stops_at_end_of_stream(self):
        batch = take_until_threshold(PullStream([1, 2]), 100, size_of=lambda n: n)
        assert batch.items == (1, 2)
        assert batch.size == 3

    def test_item_with_negative_size_stays_in_stream(self):
        stream = PullStream([5, -1, 7])
        with pytest.raises(ValueError, match="item size must be >= 0"):
            take_until_threshold(stream, 100, size_of=lambda n: n)
        assert stream.advance() == Present(-1)

    def test_rejects_non_positive_threshold(self):
        with pytest.raises(ConfigurationError):
            take_until_threshold(PullStream([1]), 0, size_of=lambda n: n)
