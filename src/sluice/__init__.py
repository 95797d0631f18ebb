"""sluice: lazy, pull-based value pipelines.

Public API:
    - Present / Absent / Slot: optional values and the one mutable holder
    - Success / Failure: fallible results with short-circuit chaining
    - PullStream: cursor stream with single-step lookahead
    - RunLengthScanner: consecutive-equal grouping over a stream
    - BatchAccumulator: size-bounded batching over a stream
    - ValidationPipeline: parse -> validate -> format with a fallback
    - Config / resolve_config: configuration
"""

from __future__ import annotations

import logging

from sluice.batching import Batch, BatchAccumulator, take_until_threshold
from sluice.config import Config, resolve_config
from sluice.errors import (
    ConfigurationError,
    ParseError,
    RuleViolationError,
    SluiceError,
    UnwrapError,
)
from sluice.option import ABSENT, Absent, OptionalValue, Present, Slot, optional
from sluice.result import (
    Failure,
    FallibleResult,
    Success,
    attempt,
    collect,
    partition,
)
from sluice.runlength import Run, RunLengthScanner, expand, run_lengths
from sluice.stream import PullStream
from sluice.validation import (
    Person,
    ValidationPipeline,
    format_person,
    parse_person,
    validate_person,
)

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("sluice")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("sluice").addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Optional values
    "ABSENT",
    "Absent",
    "OptionalValue",
    "Present",
    "Slot",
    "optional",
    # Results
    "Failure",
    "FallibleResult",
    "Success",
    "attempt",
    "collect",
    "partition",
    # Streams and consumers
    "PullStream",
    "Run",
    "RunLengthScanner",
    "expand",
    "run_lengths",
    "Batch",
    "BatchAccumulator",
    "take_until_threshold",
    # Record pipeline
    "Person",
    "ValidationPipeline",
    "format_person",
    "parse_person",
    "validate_person",
    # Configuration and errors
    "Config",
    "resolve_config",
    "ConfigurationError",
    "ParseError",
    "RuleViolationError",
    "SluiceError",
    "UnwrapError",
]
