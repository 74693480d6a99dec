"""Public emitter API: subscriptions, emission and lifecycle."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from .config import get_default_max_listeners
from .dispatch import Dispatcher
from .exceptions import InvalidArgument, NoListenersError
from .logging import get_logger, log_event
from .registry import APPEND, PREPEND, Registry, require_callable
from .types import EVERY, EventType, Listener, ListenerWrapper, resolve_original

LOGGER = get_logger("emitter")

DESTROYED = "destroyed"

# Replaced by no-ops on destroy()
_PUBLIC_OPERATIONS = (
    "at",
    "clear",
    "destroy",
    "emit",
    "event_types",
    "first",
    "get_max_listeners",
    "listener_count",
    "listeners",
    "many",
    "off",
    "on",
    "once",
    "set_max_listeners",
    "tick",
    "trigger",
    "until",
)


def _noop(*args: Any, **kwargs: Any) -> None:
    return None


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _resolve_type(event_type: Any, listener: Any) -> Tuple[EventType, Any]:
    # on(listener) and on(None, listener) both target every event type
    if listener is None and callable(event_type):
        return EVERY, event_type
    if event_type is None:
        return EVERY, listener
    return event_type, listener


def _validate_max_listeners(value: object) -> None:
    if not _is_int(value) or value < 0:
        raise InvalidArgument(f"max listeners must be a non-negative integer, got {value!r}")


class Emitter:
    """Synchronous in-process event emitter.

    Listeners are plain callables invoked with the emitted positional
    arguments. String event types may be namespaced with ``:``; emitting
    ``"a:b"`` also reaches listeners of ``"a"``. Listeners subscribed to
    :data:`EVERY` observe every emission.
    """

    every = EVERY

    def __init__(
        self,
        bindings: Mapping[EventType, Listener | Iterable[Listener]] | None = None,
        *,
        max_listeners: int | None = None,
    ) -> None:
        self._max_listeners: int | None = None
        self._destroyed = False
        self._registry = Registry(self._emit_meta, self._effective_max_listeners)
        self._dispatcher = Dispatcher(self._registry)
        if max_listeners is not None:
            self.set_max_listeners(max_listeners)
        if bindings is not None:
            self.on(bindings)

    # -- subscription -------------------------------------------------

    def on(self, event_type: Any = None, listener: Any = None, index: int | None = None) -> "Emitter":
        """Subscribe ``listener`` to ``event_type``.

        ``event_type`` may be omitted (or a listener passed in its place) to
        subscribe to every type, or may be a mapping of types to a listener
        or a list of listeners.
        """

        if listener is None and isinstance(event_type, Mapping):
            for key, handler in event_type.items():
                handlers = handler if isinstance(handler, (list, tuple)) else (handler,)
                for item in handlers:
                    self._registry.add(key, item)
            return self

        event_type, listener = _resolve_type(event_type, listener)
        self._registry.add(event_type, listener, APPEND if index is None else index)
        return self

    def first(self, event_type: Any = None, listener: Any = None) -> "Emitter":
        """Subscribe ``listener`` ahead of every existing listener of the type."""

        event_type, listener = _resolve_type(event_type, listener)
        self._registry.add(event_type, listener, PREPEND)
        return self

    def at(self, event_type: Any = None, index: Any = None, listener: Any = None) -> "Emitter":
        """Subscribe ``listener`` at position ``index``; ``at(index, listener)`` targets every type."""

        if _is_int(event_type) and listener is None and callable(index):
            event_type, index, listener = EVERY, event_type, index
        elif event_type is None:
            event_type = EVERY
        if not _is_int(index) or index < 0:
            raise InvalidArgument(f"index must be a non-negative integer, got {index!r}")
        require_callable(listener)
        self._registry.add(event_type, listener, index)
        return self

    def once(self, event_type: Any = None, listener: Any = None) -> "Emitter":
        event_type, listener = _resolve_type(event_type, listener)
        return self.many(event_type, 1, listener)

    def many(self, event_type: Any = None, times: Any = None, listener: Any = None) -> "Emitter":
        """Subscribe ``listener`` for at most ``times`` invocations.

        The subscription is removed before the final invocation runs.
        """

        if _is_int(event_type) and listener is None and callable(times):
            event_type, times, listener = EVERY, event_type, times
        elif event_type is None:
            event_type = EVERY
        if not _is_int(times) or times < 1:
            raise InvalidArgument(f"times must be a positive integer, got {times!r}")
        require_callable(listener)

        remaining = times

        def invoke(*args: Any) -> Any:
            nonlocal remaining
            if remaining <= 0:
                return None
            remaining -= 1
            if remaining == 0:
                self._registry.remove(event_type, wrapper)
            return listener(*args)

        wrapper = ListenerWrapper(invoke, resolve_original(listener))
        self._registry.add(event_type, wrapper)
        return self

    def until(self, event_type: Any = None, listener: Any = None) -> "Emitter":
        """Subscribe ``listener`` until it returns exactly ``True``."""

        event_type, listener = _resolve_type(event_type, listener)
        require_callable(listener)
        done = False

        def invoke(*args: Any) -> Any:
            nonlocal done
            if done:
                return None
            if listener(*args) is True:
                done = True
                self._registry.remove(event_type, wrapper)
            return None

        wrapper = ListenerWrapper(invoke, resolve_original(listener))
        self._registry.add(event_type, wrapper)
        return self

    def off(self, event_type: Any = None, listener: Any = None) -> "Emitter":
        event_type, listener = _resolve_type(event_type, listener)
        self._registry.remove(event_type, listener)
        return self

    def clear(self, event_type: EventType | None = None) -> "Emitter":
        """Remove all listeners, or only those of ``event_type``."""

        self._registry.clear(event_type)
        return self

    # -- emission -----------------------------------------------------

    def emit(self, event_type: EventType, *args: Any) -> bool:
        return self.trigger(event_type, args)

    def trigger(self, event_type: EventType, args: Sequence[Any] = ()) -> bool:
        """Emit ``event_type`` with ``args`` given as a single sequence."""

        return self._dispatcher.trigger(event_type, args)

    def tick(self, event_type: EventType, *args: Any) -> "asyncio.Future[bool]":
        """Emit on a later turn of the running event loop.

        The returned future resolves to ``True`` if a listener ran. It fails
        with :class:`NoListenersError` when none did, or with the exception
        the emission raised.
        """

        loop = asyncio.get_running_loop()
        future: asyncio.Future[bool] = loop.create_future()

        def run() -> None:
            if future.cancelled():
                return
            try:
                executed = self.trigger(event_type, args)
            except Exception as exc:
                future.set_exception(exc)
                return
            if executed:
                future.set_result(True)
            else:
                future.set_exception(NoListenersError(event_type))

        loop.call_soon(run)
        return future

    def _emit_meta(self, event_type: EventType, args: Sequence[object]) -> bool:
        return self._dispatcher.trigger(event_type, args)

    # -- introspection ------------------------------------------------

    def listeners(self, event_type: EventType) -> List[Listener]:
        return self._registry.listeners(event_type)

    def listener_count(self, event_type: EventType) -> int:
        return self._registry.count(event_type)

    def event_types(self) -> List[EventType]:
        return self._registry.types()

    def get_max_listeners(self) -> int:
        return self._effective_max_listeners()

    def set_max_listeners(self, value: int | None) -> "Emitter":
        """Set the per-type alert threshold; ``None`` falls back to the process default."""

        if value is not None:
            _validate_max_listeners(value)
        self._max_listeners = value
        return self

    @property
    def max_listeners(self) -> int:
        return self.get_max_listeners()

    @max_listeners.setter
    def max_listeners(self, value: int | None) -> None:
        self.set_max_listeners(value)

    def _effective_max_listeners(self) -> int:
        if self._max_listeners is not None:
            return self._max_listeners
        return get_default_max_listeners()

    # -- lifecycle ----------------------------------------------------

    def destroy(self) -> None:
        """Fire ``:destroy``, drop every listener and make the instance inert."""

        self._dispatcher.trigger(":destroy")
        types = len(self._registry)
        self._registry.clear()
        for name in _PUBLIC_OPERATIONS:
            setattr(self, name, _noop)
        self._destroyed = True
        log_event(LOGGER, "emitter_destroyed", {"types": types})

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def to_json(self) -> Dict[str, Any] | str:
        if self._destroyed:
            return DESTROYED
        return {
            "maxListeners": self._effective_max_listeners(),
            "listenerCount": {
                event_type: self._registry.count(event_type) for event_type in self._registry.types()
            },
        }

    def __str__(self) -> str:
        data = self.to_json()
        if isinstance(data, dict):
            data = {
                **data,
                "listenerCount": {str(key): value for key, value in data["listenerCount"].items()},
            }
        return f"{type(self).__name__} {json.dumps(data, separators=(',', ':'))}"


__all__ = ["DESTROYED", "Emitter"]
