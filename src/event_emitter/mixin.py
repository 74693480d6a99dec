"""Apply a selection of the emitter API onto an arbitrary object."""

from __future__ import annotations

from functools import wraps
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, TypeVar, Union

from .emitter import Emitter
from .exceptions import InvalidArgument
from .types import EventType, Listener

T = TypeVar("T")

API: Mapping[str, Callable[..., Any]] = MappingProxyType(
    {
        name: getattr(Emitter, name)
        for name in (
            "at",
            "clear",
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
    }
)

EMITTER_ATTRIBUTE = "_event_emitter"

Selection = Optional[Union[str, Iterable[str], Mapping[str, str]]]


def resolve_selection(selection: Selection) -> Dict[str, str]:
    """Normalise ``selection`` into a mapping of target attribute to API name."""

    if selection is None:
        mapping = {name: name for name in API}
    elif isinstance(selection, str):
        mapping = {name: name for name in selection.split()}
    elif isinstance(selection, Mapping):
        mapping = {str(alias): name for alias, name in selection.items()}
    else:
        mapping = {name: name for name in selection}

    unknown = sorted(name for name in mapping.values() if name not in API)
    if unknown:
        raise InvalidArgument(f"Unknown emitter operations: {unknown}")
    invalid = sorted(alias for alias in mapping if not alias.isidentifier())
    if invalid:
        raise InvalidArgument(f"Invalid attribute names: {invalid}")
    return mapping


def _bind(emitter: Emitter, name: str, target: Any) -> Callable[..., Any]:
    @wraps(API[name])
    def operation(*args: Any, **kwargs: Any) -> Any:
        # Looked up per call so a destroyed emitter's no-ops apply
        result = getattr(emitter, name)(*args, **kwargs)
        return target if result is emitter else result

    return operation


def as_emitter(
    target: T,
    selection: Selection = None,
    bindings: Mapping[EventType, Listener | Iterable[Listener]] | None = None,
) -> T:
    """Give ``target`` the selected emitter operations.

    ``selection`` may be ``None`` for the whole API, a whitespace separated
    string or iterable of operation names, or a mapping of attribute names
    to operation names, e.g. ``{"fire_event": "emit"}``. Operations that
    return the emitter return ``target`` instead so calls still chain.
    """

    mapping = resolve_selection(selection)
    emitter = Emitter(bindings)
    setattr(target, EMITTER_ATTRIBUTE, emitter)
    for alias, name in mapping.items():
        setattr(target, alias, _bind(emitter, name, target))
    return target


__all__ = ["API", "EMITTER_ATTRIBUTE", "as_emitter", "resolve_selection"]
