"""Process-wide configuration for emitters."""
from __future__ import annotations

import os
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import InvalidArgument

ENV_DEFAULT_MAX_LISTENERS = "EMITTER_DEFAULT_MAX_LISTENERS"


class EmitterSettings(BaseModel):
    """Settings shared by every emitter that has not overridden them."""

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    default_max_listeners: int = Field(
        default=10,
        ge=0,
        description="Listeners per event type before a :maxListeners alert fires. 0 disables the alert.",
    )

    @field_validator("default_max_listeners", mode="before")
    @classmethod
    def reject_booleans(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("default_max_listeners must be an integer")
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EmitterSettings":
        """Build settings from environment variables, falling back to defaults."""

        environ = os.environ if environ is None else environ
        raw = environ.get(ENV_DEFAULT_MAX_LISTENERS)
        if raw is None or not raw.strip():
            return cls()
        try:
            value = int(raw)
        except ValueError as exc:
            raise InvalidArgument(
                f"{ENV_DEFAULT_MAX_LISTENERS} must be an integer, got {raw!r}"
            ) from exc
        return build_settings({"default_max_listeners": value})


def build_settings(raw: Mapping[str, Any]) -> EmitterSettings:
    """Validate ``raw`` into :class:`EmitterSettings`."""

    try:
        return EmitterSettings.model_validate(dict(raw))
    except ValidationError as exc:
        raise InvalidArgument(str(exc)) from exc


_settings: EmitterSettings = EmitterSettings.from_env()


def get_settings() -> EmitterSettings:
    return _settings


def configure(**overrides: Any) -> EmitterSettings:
    """Replace the process-wide settings, keeping values not overridden."""

    global _settings
    _settings = build_settings({**_settings.model_dump(), **overrides})
    return _settings


def reset_settings() -> EmitterSettings:
    """Restore the settings derived from the environment."""

    global _settings
    _settings = EmitterSettings.from_env()
    return _settings


def get_default_max_listeners() -> int:
    return _settings.default_max_listeners


def set_default_max_listeners(value: int) -> None:
    configure(default_max_listeners=value)


__all__ = [
    "ENV_DEFAULT_MAX_LISTENERS",
    "EmitterSettings",
    "build_settings",
    "configure",
    "get_default_max_listeners",
    "get_settings",
    "reset_settings",
    "set_default_max_listeners",
]
