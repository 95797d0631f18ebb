"""Configuration: schema wall, frozen runtime payload, and resolution.

Resolution order is defaults < environment (``SLUICE_*``) < overrides. Values
pass through the Pydantic ``Settings`` schema once and are frozen into a
``Config`` that components receive explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from functools import cache
import os
from typing import TYPE_CHECKING, Any, Literal, overload

from pydantic import BaseModel, Field, ValidationError, field_validator

from sluice.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_PREFIX = "SLUICE_"

_DOTENV_LOADED: bool = False


# --- Schema (Pydantic wall) ---


class Settings(BaseModel):
    """Validation schema and defaults for every configuration field."""

    #: Cumulative size at which an open batch is closed.
    batch_capacity: int = Field(default=30, gt=0)
    #: Minimum age accepted by the person validation stage.
    min_age: int = Field(default=18, ge=0)
    fallback_message: str = Field(default="Invalid person")
    field_separator: str = Field(default=",", min_length=1)

    model_config = {"extra": "forbid"}

    @field_validator("fallback_message", mode="before")
    @classmethod
    def normalize_fallback(cls, v: Any) -> Any:
        """Trim surrounding whitespace on the fallback message."""
        if isinstance(v, str):
            return v.strip()
        return v


@cache
def _default_settings() -> dict[str, Any]:
    return Settings().model_dump()


# --- Immutable runtime payload ---


@dataclass(frozen=True)
class Config:
    """Immutable configuration handed to batching and validation components.

    Example:
        config = Config(batch_capacity=64)
        accumulator = BatchAccumulator.from_config(config)
    """

    batch_capacity: int = 30
    min_age: int = 18
    fallback_message: str = "Invalid person"
    field_separator: str = ","

    def __post_init__(self) -> None:
        """Validate fields so a hand-built Config is as safe as a resolved one."""
        if (
            not isinstance(self.batch_capacity, int)
            or isinstance(self.batch_capacity, bool)
            or self.batch_capacity <= 0
        ):
            raise ConfigurationError(
                "batch_capacity must be a positive integer, "
                f"got {self.batch_capacity!r}",
                hint="This is the cumulative item size at which a batch closes.",
            )
        if (
            not isinstance(self.min_age, int)
            or isinstance(self.min_age, bool)
            or self.min_age < 0
        ):
            raise ConfigurationError(
                f"min_age must be an integer >= 0, got {self.min_age!r}",
            )
        if not self.field_separator:
            raise ConfigurationError(
                "field_separator must not be empty",
                hint="Records are split on this string, e.g. ','.",
            )


class Origin(str, Enum):
    """Where a configuration value came from."""

    DEFAULT = "default"
    ENV = "env"
    OVERRIDES = "overrides"


SourceMap = dict[str, Origin]


# --- Loading ---


def _try_load_dotenv() -> None:
    """Load a ``.env`` file once, if python-dotenv finds one."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    from dotenv import load_dotenv

    load_dotenv()
    _DOTENV_LOADED = True


def load_env() -> dict[str, Any]:
    """Read ``SLUICE_*`` variables for known fields.

    Integer fields are coerced when the text parses; otherwise the raw string
    is kept so the schema reports a precise error.
    """
    config: dict[str, Any] = {}
    for name, info in Settings.model_fields.items():
        raw = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is None:
            continue
        if info.annotation is int:
            try:
                config[name] = int(raw.strip())
            except ValueError:
                config[name] = raw
        else:
            config[name] = raw
    return config


# --- Public resolution API ---


@overload
def resolve_config(
    overrides: Mapping[str, Any] | None = ...,
    *,
    explain: Literal[True],
) -> tuple[Config, SourceMap]: ...


@overload
def resolve_config(
    overrides: Mapping[str, Any] | None = ...,
    *,
    explain: Literal[False] = ...,
) -> Config: ...


def resolve_config(
    overrides: Mapping[str, Any] | None = None,
    *,
    explain: bool = False,
) -> Config | tuple[Config, SourceMap]:
    """Resolve configuration from defaults, environment, and overrides.

    Args:
        overrides: Programmatic values; these win over everything else.
        explain: When True, also return the origin of each field.

    Returns:
        A ``Config``, or ``(Config, SourceMap)`` when ``explain`` is True.

    Raises:
        ConfigurationError: If the merged values fail schema validation.
    """
    _try_load_dotenv()

    merged: dict[str, Any] = dict(_default_settings())
    sources: SourceMap = dict.fromkeys(merged, Origin.DEFAULT)
    layers = ((Origin.ENV, load_env()), (Origin.OVERRIDES, overrides or {}))
    for origin, layer in layers:
        for key, value in layer.items():
            merged[key] = value
            sources[key] = origin

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        loc = ".".join(str(part) for part in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, ") :]
        hint = None
        if err.get("type") == "extra_forbidden":
            known = ", ".join(f.name for f in fields(Config))
            hint = f"Known fields: {known}"
        raise ConfigurationError(
            f"Configuration validation failed for {loc}: {msg}", hint=hint
        ) from e

    cfg = Config(**settings.model_dump())
    return (cfg, sources) if explain else cfg


__all__ = (
    "ENV_PREFIX",
    "Config",
    "Origin",
    "Settings",
    "SourceMap",
    "load_env",
    "resolve_config",
)
