"""Core types shared by the registry, dispatcher and emitter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Union


class _Every:
    """Sentinel event type whose listeners observe every emitted type."""

    _instance: "_Every | None" = None

    def __new__(cls) -> "_Every":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "EVERY"

    def __str__(self) -> str:
        return "@@every"

    def __reduce__(self) -> str:
        return "EVERY"


EVERY = _Every()

EventType = Union[str, _Every]
Listener = Callable[..., Any]


@dataclass(frozen=True, eq=False, slots=True)
class ListenerWrapper:
    """Internal callable adding counting or conditional behaviour to a listener.

    ``original`` is the callable the caller subscribed, so removal by the
    caller's reference matches the wrapper. Only one level is resolved.
    """

    invoke: Listener
    original: Listener

    def __call__(self, *args: Any) -> Any:
        return self.invoke(*args)


class ListenerList(list):
    """Storage for two or more listeners of a single event type."""


def resolve_original(listener: Listener) -> Listener:
    """Return the caller-facing identity of ``listener``."""

    if isinstance(listener, ListenerWrapper):
        return listener.original
    return listener


def matches(candidate: Listener, listener: Listener) -> bool:
    # Bound methods compare equal, not identical, across attribute accesses
    return candidate == listener or (
        isinstance(candidate, ListenerWrapper) and candidate.original == listener
    )


__all__ = [
    "EVERY",
    "EventType",
    "Listener",
    "ListenerList",
    "ListenerWrapper",
    "matches",
    "resolve_original",
]
