"""Listener registry owned by a single emitter."""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence, Set, Union

from .exceptions import InvalidArgument, InvalidListener
from .logging import dispatch_context, get_logger
from .types import (
    EVERY,
    EventType,
    Listener,
    ListenerList,
    matches,
    resolve_original,
)

LOGGER = get_logger("registry")

APPEND = "append"
PREPEND = "prepend"

Position = Union[str, int]
MetaEmitter = Callable[[EventType, Sequence[object]], bool]


def require_callable(listener: object) -> None:
    if not callable(listener):
        raise InvalidListener(f"listener must be callable, got {type(listener).__name__}")


def require_event_type(event_type: object) -> None:
    if event_type is not EVERY and not isinstance(event_type, str):
        raise InvalidArgument(
            f"event type must be a string or EVERY, got {type(event_type).__name__}"
        )


def _insertion_index(count: int, position: Position) -> int:
    if position == APPEND:
        return count
    if position == PREPEND:
        return 0
    if isinstance(position, bool) or not isinstance(position, int):
        raise InvalidArgument(f"position must be an integer index, got {position!r}")
    if position < 0 or position > count:
        raise InvalidArgument(f"index {position} is out of range for {count} listener(s)")
    return position


class Registry:
    """Maps event types to a single listener or a :class:`ListenerList`."""

    def __init__(self, emit_meta: MetaEmitter, max_listeners: Callable[[], int]) -> None:
        self._events: Dict[EventType, Listener | ListenerList] = {}
        self._emit_meta = emit_meta
        self._max_listeners = max_listeners
        # Types already alerted; kept until the type is deleted
        self._warned: Set[EventType] = set()

    def get(self, event_type: EventType) -> Listener | ListenerList | None:
        return self._events.get(event_type)

    def add(self, event_type: EventType, listener: Listener, position: Position = APPEND) -> None:
        """Store ``listener`` for ``event_type`` at ``position``.

        Fires ``:on`` before the listener is stored and ``:maxListeners`` the
        first time the type grows past the effective limit.
        """

        require_callable(listener)
        require_event_type(event_type)
        _insertion_index(self.count(event_type), position)

        if ":on" in self._events:
            self._emit_meta(":on", (event_type, resolve_original(listener)))

        # :on listeners may have changed the registry
        stored = self._events.get(event_type)
        if stored is None:
            self._events[event_type] = listener
            return

        index = _insertion_index(self.count(event_type), position)
        if not isinstance(stored, ListenerList):
            stored = ListenerList([stored])
            self._events[event_type] = stored
        stored.insert(index, listener)

        limit = self._max_listeners()
        if limit > 0 and event_type not in self._warned and len(stored) > limit:
            self._warned.add(event_type)
            LOGGER.warning(
                "possible listener leak detected",
                extra=dispatch_context(event_type, count=len(stored), max=limit),
            )
            self._emit_meta(":maxListeners", (event_type, resolve_original(listener)))

    def remove(self, event_type: EventType, listener: Listener) -> bool:
        """Remove the most recently added registration matching ``listener``.

        Returns ``False`` when nothing matched.
        """

        require_callable(listener)
        stored = self._events.get(event_type)
        if stored is None:
            return False

        if isinstance(stored, ListenerList):
            for index in range(len(stored) - 1, -1, -1):
                if matches(stored[index], listener):
                    break
            else:
                return False
            del stored[index]
            if len(stored) == 1:
                self._events[event_type] = stored[0]
        elif matches(stored, listener):
            del self._events[event_type]
            self._warned.discard(event_type)
        else:
            return False

        if ":off" in self._events:
            self._emit_meta(":off", (event_type, resolve_original(listener)))
        return True

    def clear(self, event_type: EventType | None = None) -> None:
        """Remove every listener, or only those of ``event_type``."""

        if ":off" not in self._events:
            if event_type is None:
                self._events.clear()
                self._warned.clear()
            else:
                self._events.pop(event_type, None)
                self._warned.discard(event_type)
            return

        if event_type is None:
            for key in list(self._events):
                if key != ":off":
                    self.clear(key)
            # Cleared last so :off listeners observe every sibling removal
            self.clear(":off")
            self._events.clear()
            self._warned.clear()
            return

        stored = self._events.get(event_type)
        if isinstance(stored, ListenerList):
            for listener in reversed(list(stored)):
                self.remove(event_type, listener)
        elif stored is not None:
            self.remove(event_type, stored)
        self._events.pop(event_type, None)
        self._warned.discard(event_type)

    def warned(self, event_type: EventType) -> bool:
        """Whether the :maxListeners alert already fired for ``event_type``."""

        return event_type in self._warned

    def count(self, event_type: EventType) -> int:
        stored = self._events.get(event_type)
        if stored is None:
            return 0
        if isinstance(stored, ListenerList):
            return len(stored)
        return 1

    def listeners(self, event_type: EventType) -> List[Listener]:
        stored = self._events.get(event_type)
        if stored is None:
            return []
        if isinstance(stored, ListenerList):
            return list(stored)
        return [stored]

    def types(self) -> List[EventType]:
        return list(self._events)

    def __contains__(self, event_type: object) -> bool:
        return event_type in self._events

    def __len__(self) -> int:
        return len(self._events)


__all__ = ["APPEND", "PREPEND", "Position", "Registry", "require_callable", "require_event_type"]
