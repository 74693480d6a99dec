"""In-process event emitter with namespaced events and wildcard listeners."""

from .config import (
    EmitterSettings,
    configure,
    get_default_max_listeners,
    get_settings,
    reset_settings,
    set_default_max_listeners,
)
from .emitter import DESTROYED, Emitter
from .exceptions import (
    EmitterError,
    InvalidArgument,
    InvalidListener,
    NoListenersError,
    UnhandledEmitterError,
)
from .mixin import API, as_emitter
from .types import EVERY, ListenerWrapper

__version__ = "2.0.0"

__all__ = [
    "API",
    "DESTROYED",
    "EVERY",
    "Emitter",
    "EmitterError",
    "EmitterSettings",
    "InvalidArgument",
    "InvalidListener",
    "ListenerWrapper",
    "NoListenersError",
    "UnhandledEmitterError",
    "as_emitter",
    "configure",
    "get_default_max_listeners",
    "get_settings",
    "reset_settings",
    "set_default_max_listeners",
]
