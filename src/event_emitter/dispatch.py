"""Synchronous event dispatch with namespace cascading and error redirection."""

from __future__ import annotations

from typing import List, Sequence

from .exceptions import UnhandledEmitterError
from .logging import dispatch_context, get_logger
from .registry import Registry
from .types import EVERY, EventType, ListenerList

LOGGER = get_logger("dispatch")

ERROR = "error"
NAMESPACE_SEPARATOR = ":"


def raise_unhandled(args: Sequence[object]) -> None:
    """Raise for an ``error`` event nobody subscribed to."""

    error = args[0] if args else None
    if isinstance(error, Exception):
        raise error
    raise UnhandledEmitterError('Uncaught, unspecified "error" event.')


def namespace_levels(event_type: EventType) -> List[EventType]:
    """Return ``event_type`` followed by each of its namespace ancestors.

    ``"a:b:c"`` yields ``["a:b:c", "a:b", "a"]``. A leading separator does
    not start a namespace, so ``":on"`` is a single level.
    """

    if not isinstance(event_type, str):
        return [event_type]
    levels: List[EventType] = [event_type]
    index = event_type.rfind(NAMESPACE_SEPARATOR)
    while index > 0:
        event_type = event_type[:index]
        levels.append(event_type)
        index = event_type.rfind(NAMESPACE_SEPARATOR)
    return levels


class Dispatcher:
    """Invokes the listeners stored in a :class:`Registry`."""

    def __init__(self, registry: Registry) -> None:
        self._registry = registry

    def trigger(self, event_type: EventType, args: Sequence[object] = ()) -> bool:
        """Dispatch ``event_type`` and its namespace ancestors, then wildcard listeners.

        Returns ``True`` when at least one listener ran.
        """

        args = tuple(args)
        executed = False
        for level in namespace_levels(event_type):
            executed = self.dispatch_one(level, args) or executed
        if event_type is not EVERY:
            executed = self.dispatch_one(EVERY, args) or executed
        return executed

    def dispatch_one(self, event_type: EventType, args: Sequence[object]) -> bool:
        stored = self._registry.get(event_type)
        if stored is None:
            if event_type == ERROR:
                raise_unhandled(args)
            return False

        # Snapshot so listeners may subscribe or unsubscribe mid-dispatch
        listeners = tuple(stored) if isinstance(stored, ListenerList) else (stored,)
        errors: List[Exception] = []
        for listener in listeners:
            try:
                listener(*args)
            except Exception as exc:
                LOGGER.debug(
                    "listener raised, redirecting to error",
                    extra=dispatch_context(event_type, listener),
                    exc_info=exc,
                )
                errors.append(exc)

        for error in errors:
            self.dispatch_error(error)
        return True

    def dispatch_error(self, error: Exception) -> None:
        """Deliver a collected listener exception to the ``error`` listeners.

        Unguarded: an ``error`` listener that raises propagates to the caller.
        """

        stored = self._registry.get(ERROR)
        if stored is None:
            raise_unhandled((error,))
        listeners = tuple(stored) if isinstance(stored, ListenerList) else (stored,)
        for listener in listeners:
            listener(error)


__all__ = ["Dispatcher", "ERROR", "NAMESPACE_SEPARATOR", "namespace_levels", "raise_unhandled"]
