"""
Persisted memo of which locale actually worked for a language hint.

Repeated switches to the same hint ('en') go straight to the locale that
loaded last time ('en-GB') instead of walking the whole fallback chain.
The memo is a small JSON object on disk. An entry is dropped as soon as
its locale fails to load; the whole memo is reset if the file cannot be
parsed.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

logger = logging.getLogger(__name__)


class AlternatesMemo:
    """
    Hint -> locale key-value memo, optionally persisted as JSON.

    Attributes:
        path: JSON file to persist to, or None to keep the memo in memory.

    Example:
        >>> memo = AlternatesMemo(Path("/tmp/alternates.json"))
        >>> memo.set("en", "en-GB")
        >>> memo.get("en")
        'en-GB'
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        self._entries: dict[str, str] | None = None
        self._lock = threading.Lock()

    def get(self, hint: str) -> str | None:
        with self._lock:
            return self._load().get(hint)

    def set(self, hint: str, locale: str) -> None:
        with self._lock:
            entries = self._load()
            if entries.get(hint) == locale:
                return
            entries[hint] = locale
            self._save(entries)

    def discard(self, hint: str) -> None:
        """Forget the locale remembered for a hint, if any."""
        with self._lock:
            entries = self._load()
            if entries.pop(hint, None) is not None:
                logger.debug("Discarded remembered locale for %r", hint)
                self._save(entries)

    def clear(self) -> None:
        with self._lock:
            self._entries = {}
            self._save(self._entries)

    def as_dict(self) -> dict[str, str]:
        with self._lock:
            return dict(self._load())

    def _load(self) -> dict[str, str]:
        if self._entries is not None:
            return self._entries

        self._entries = {}
        if self.path is None or not self.path.exists():
            return self._entries

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to load alternates memo, resetting it: %s", e)
            return self._entries

        if not isinstance(data, dict):
            logger.warning("Alternates memo is not a JSON object, resetting it")
            return self._entries

        self._entries = {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}
        return self._entries

    def _save(self, entries: dict[str, str]) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(entries, f, indent=2, sort_keys=True)
        except OSError as e:
            logger.warning("Failed to save alternates memo to %s: %s", self.path, e)
