"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration, and small shared
test doubles. Fixtures here are autouse unless noted.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import suppress
from dataclasses import dataclass, field
import logging
import os
from typing import Any

import pytest

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class CallRecorder:
    """Callable spy that records every argument tuple it receives.

    Use it as a stage or fallback to prove a function was (or was not) invoked.
    """

    returns: Callable[..., Any] = lambda *args: args[0] if args else None
    calls: list[tuple[Any, ...]] = field(default_factory=list)

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args)
        return self.returns(*args)

    @property
    def called(self) -> bool:
        return bool(self.calls)


@dataclass
class CountingSource:
    """Iterable that counts how many elements have been pulled from it."""

    items: list[Any]
    pulled: int = 0

    def __iter__(self) -> Iterator[Any]:
        for item in self.items:
            self.pulled += 1
            yield item


@pytest.fixture
def counting_source() -> type[CountingSource]:
    """Expose ``CountingSource`` to tests (not autouse)."""
    return CountingSource


@pytest.fixture
def recorder() -> Callable[..., CallRecorder]:
    """Factory for ``CallRecorder`` spies (not autouse)."""

    def make(returns: Callable[..., Any] | None = None) -> CallRecorder:
        return CallRecorder(returns=returns) if returns else CallRecorder()

    return make


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_sluice_env(monkeypatch):
    """Clear SLUICE_* variables so configuration tests start from defaults."""
    for key in list(os.environ.keys()):
        if key.startswith("SLUICE_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def sluice_debug_logging():
    """Let caplog observe the library's debug records."""
    logging.getLogger("sluice").setLevel(logging.DEBUG)
