"""Custom exceptions raised by the event emitter."""

from __future__ import annotations

from typing import Any


class EmitterError(RuntimeError):
    """Base error for all emitter related exceptions."""


class InvalidListener(EmitterError, TypeError):
    """Raised when a value expected to be callable is not."""


class InvalidArgument(EmitterError, ValueError):
    """Raised when a count, index or max-listeners value is invalid."""


class UnhandledEmitterError(EmitterError):
    """Raised when an ``error`` event is emitted without a subscriber."""


class NoListenersError(EmitterError):
    """Raised into a deferred emission when no listener executed."""

    def __init__(self, event_type: Any) -> None:
        super().__init__(f"No listeners executed for event type {event_type!r}")
        self.event_type = event_type
