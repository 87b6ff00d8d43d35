"""
Minimal synchronous signals.

Components publish events ("spell check invoked", "misspelling observed",
"spellchecker changed", raw input) through Signal objects; subscribers
connect plain callables. A failing handler is logged and does not stop
the remaining handlers or reach the emitter.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class Signal:
    """
    A list of handlers called in connection order on emit().

    Example:
        >>> changed = Signal("changed")
        >>> disconnect = changed.connect(lambda locale: print(locale))
        >>> changed.emit("de-DE")
        de-DE
        >>> disconnect()
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._handlers: list[Handler] = []
        self._lock = threading.Lock()

    def connect(self, handler: Handler) -> Callable[[], None]:
        """Subscribe a handler. Returns a callable that unsubscribes it."""
        with self._lock:
            self._handlers.append(handler)
        return lambda: self.disconnect(handler)

    def disconnect(self, handler: Handler) -> None:
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)

    def emit(self, *args: Any) -> None:
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(*args)
            except Exception:
                logger.exception("Handler %r for signal %r failed", handler, self.name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, handlers={len(self)})"
