"""
Dictionary acquisition with an on-disk cache.

Each locale's dictionary lives in one file inside the cache directory,
named after the canonical locale code. A cached file smaller than the
minimum plausible size is a corrupted download: it is deleted and
fetched again. There is no other retry here; the session retries by
trying alternative locales instead.

The cache directory is shared between sessions and processes. Two
acquisitions of the same locale may race; the last writer wins and
the content is identical, so the race is harmless.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import requests

from livespell.config import DictionaryConfig
from livespell.dictionaries.sources import dictionary_url_for
from livespell.exceptions import (
    CorruptDownload,
    DictionaryCacheError,
    DictionaryError,
    DownloadFailed,
)
from livespell.locales.normalize import normalize_locale_code

logger = logging.getLogger(__name__)


class DictionaryStore:
    """
    Acquires and caches per-locale dictionary blobs.

    Attributes:
        config: DictionaryConfig with cache location, URL template and
            validity threshold.
        http: requests.Session used for downloads.

    Example:
        >>> store = DictionaryStore(DictionaryConfig(cache_dir=Path("/tmp/dicts")))
        >>> blob = store.acquire("en-US")
        >>> path = store.acquire("de-DE", cache_only=True)
    """

    def __init__(
        self,
        config: DictionaryConfig | None = None,
        http: requests.Session | None = None,
    ) -> None:
        self.config = config or DictionaryConfig()
        self.http = http or requests.Session()

    @property
    def cache_dir(self) -> Path:
        return self.config.resolved_cache_dir()

    def path_for(self, locale: str) -> Path:
        """Return the cache file path for a locale (does not touch disk)."""
        return self.cache_dir / f"{normalize_locale_code(locale)}{self.config.file_suffix}"

    def url_for(self, locale: str) -> str:
        return dictionary_url_for(locale, self.config.url_template)

    def acquire(self, locale: str, cache_only: bool = False) -> bytes | Path:
        """
        Return the dictionary for a locale, downloading it on a cache miss.

        Args:
            locale: Locale code in any spelling ('en_us', 'en-US').
            cache_only: If True, make sure the file is cached and return its
                path instead of reading the bytes into memory.

        Returns:
            The dictionary bytes, or the cache file path if cache_only.

        Raises:
            InvalidLocaleFormat: If the locale code is malformed.
            DownloadFailed: If the remote source cannot be fetched.
            CorruptDownload: If the downloaded dictionary is undersized.
            DictionaryCacheError: If the cache directory cannot be written.
        """
        locale = normalize_locale_code(locale)
        target = self.path_for(locale)

        cached = self._read_cached(locale, target, cache_only)
        if cached is not None:
            return cached

        body = self._download(locale)
        self._ensure_cache_dir()
        self._persist(target, body)

        if len(body) < self.config.min_valid_size:
            self._remove(target)
            raise CorruptDownload(locale, len(body))

        return target if cache_only else body

    def prefetch(self, locales: list[str]) -> dict[str, Path]:
        """
        Warm the cache for several locales without keeping their bytes.

        Failures are logged and skipped.

        Returns:
            Mapping of locale to cache path for the locales that succeeded.
        """
        ready: dict[str, Path] = {}
        for locale in locales:
            try:
                path = self.acquire(locale, cache_only=True)
            except DictionaryError as e:
                logger.warning("Could not prefetch %s: %s", locale, e)
                continue
            ready[normalize_locale_code(locale)] = Path(path)
        return ready

    def cached_locales(self) -> list[str]:
        """Return the locales that currently have a cache file."""
        if not self.cache_dir.is_dir():
            return []
        suffix = self.config.file_suffix
        return sorted(
            p.name[: -len(suffix)] for p in self.cache_dir.iterdir() if p.name.endswith(suffix)
        )

    def evict(self, locale: str) -> bool:
        """Delete a locale's cache file. Returns True if one was removed."""
        target = self.path_for(locale)
        if not target.exists():
            return False
        self._remove(target)
        return True

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _read_cached(self, locale: str, target: Path, cache_only: bool) -> bytes | Path | None:
        """Return a valid cached dictionary, or None after clearing a bogus one."""
        if not target.exists():
            return None

        try:
            if cache_only:
                size = target.stat().st_size
                data = None
            else:
                data = target.read_bytes()
                size = len(data)
        except OSError as e:
            logger.warning("Failed to read cached dictionary %s: %s", target, e)
        else:
            if size >= self.config.min_valid_size:
                logger.debug("Returning local copy: %s", target)
                return target if cache_only else data
            logger.warning(
                "Cached dictionary for %s is only %d bytes, most likely bogus; re-downloading",
                locale,
                size,
            )

        self._remove(target)
        return None

    def _download(self, locale: str) -> bytes:
        url = self.url_for(locale)
        logger.info("Downloading dictionary for %s from %s", locale, url)
        try:
            response = self.http.get(
                url,
                headers={"Accept": "application/octet-stream"},
                timeout=self.config.download_timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise DownloadFailed(locale, url, str(e)) from e

        return response.content

    def _ensure_cache_dir(self) -> None:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DictionaryCacheError(
                f"Cannot create cache directory {self.cache_dir}: {e}"
            ) from e

    def _persist(self, target: Path, body: bytes) -> None:
        """Write the body next to the target, then rename it into place."""
        fd, tmp_name = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}.", suffix=".part"
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(body)
            os.replace(tmp_name, target)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise DictionaryCacheError(f"Cannot write {target}: {e}") from e
        logger.debug("Saved %d bytes to %s", len(body), target)

    def _remove(self, target: Path) -> None:
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            raise DictionaryCacheError(f"Cannot remove bogus dictionary {target}: {e}") from e
