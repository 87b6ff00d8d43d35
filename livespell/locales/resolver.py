"""
Locale resolution: which regional dictionary to use for a language.

The likely-locale table is built once per process from what the host
OS reports as installed, then consulted before the static fallback
table. Building it is lazy and guarded so concurrent sessions share a
single build.

Policy notes:
- A language maps to a locale only if exactly ONE installed locale
  exists for it. Some distros dump every region for a language into
  `locale -a`; guessing among them is worse than deferring to the
  documented default in the fallback table.
- The LANG environment variable is the user's most explicit regional
  preference and always overrides the table entry for its language.
"""

from __future__ import annotations

import locale as _locale
import logging
import os
import re
import subprocess
import sys
import threading
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType

from livespell.exceptions import UnknownLanguage
from livespell.locales.fallback import FALLBACK_LOCALES
from livespell.locales.normalize import language_of, normalize_locale_code

logger = logging.getLogger(__name__)

# Matches the leading 'en_US' of 'en_US.UTF-8', 'en_US@euro' and friends, but not
# three-letter languages ('chr_US') or longer regions
INSTALLED_LOCALE_PATTERN = re.compile(r"^[a-z]{2}[_-][A-Z]{2}(?![A-Za-z])")

LOCALE_COMMAND_TIMEOUT = 5.0  # seconds


# =============================================================================
# HOST LOCALE ENUMERATION
# =============================================================================


def _posix_installed_locales() -> list[str]:
    """Return the raw lines of `locale -a`, or [] if it cannot run."""
    try:
        result = subprocess.run(
            ["locale", "-a"],
            capture_output=True,
            text=True,
            timeout=LOCALE_COMMAND_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Unable to run `locale -a`: %s", e)
        return []
    return result.stdout.splitlines()


def _windows_keyboard_locales() -> list[str]:
    """Return locale names for the installed keyboard layouts."""
    import ctypes

    user32 = ctypes.windll.user32  # type: ignore[attr-defined]
    count = user32.GetKeyboardLayoutList(0, None)
    if count <= 0:
        return []

    layouts = (ctypes.c_void_p * count)()
    user32.GetKeyboardLayoutList(count, layouts)

    names = []
    for handle in layouts:
        # Low word of the layout handle is the LANGID
        lang_id = (handle or 0) & 0xFFFF
        name = _locale.windows_locale.get(lang_id)
        if name:
            names.append(name)
    return names


def installed_locales() -> list[str]:
    """
    List locale-like identifiers the host OS considers installed.

    Windows reports installed keyboard languages; everything else
    reports `locale -a`. Entries are raw and may need filtering.
    """
    if sys.platform == "win32":
        try:
            return _windows_keyboard_locales()
        except (OSError, AttributeError) as e:
            logger.debug("Unable to enumerate keyboard layouts: %s", e)
            return []
    return _posix_installed_locales()


# =============================================================================
# TABLE CONSTRUCTION
# =============================================================================


def build_locale_table(installed: Iterable[str], preferred: str | None = None) -> dict[str, str]:
    """
    Build the language -> locale table from installed locale identifiers.

    Args:
        installed: Raw identifiers such as 'en_US.UTF-8' or 'C.UTF-8'.
        preferred: Value of the preferred-locale environment variable
            (e.g. LANG), which overrides the entry for its language.

    Returns:
        Mapping of two-letter language code to canonical locale. Languages
        with more than one distinct installed locale are left out.

    Example:
        >>> build_locale_table(["en_US.UTF-8", "de_DE", "de_AT"])
        {'en': 'en-US'}
    """
    by_language: dict[str, set[str]] = {}
    for entry in installed:
        match = INSTALLED_LOCALE_PATTERN.match(entry.strip())
        if not match:
            continue
        code = normalize_locale_code(match.group(0))
        by_language.setdefault(language_of(code), set()).add(code)

    logger.debug("Installed locales by language: %s", by_language)

    table = {
        language: next(iter(codes)) for language, codes in by_language.items() if len(codes) == 1
    }

    if preferred:
        match = INSTALLED_LOCALE_PATTERN.match(preferred.strip())
        if match:
            code = normalize_locale_code(match.group(0))
            table[language_of(code)] = code

    return table


class LocaleTable:
    """
    Process-wide likely-locale table, built lazily on first use.

    The build runs at most once per instance; later calls return the same
    read-only mapping. Use the module-level default via get_locale_table()
    unless a test needs its own source.

    Attributes:
        source: Callable returning the host's installed locale identifiers.
        environ: Environment mapping to read the preferred locale from.
        env_var: Name of the preferred-locale variable.
    """

    def __init__(
        self,
        source: Callable[[], Iterable[str]] | None = None,
        environ: Mapping[str, str] | None = None,
        env_var: str = "LANG",
    ) -> None:
        self.source = source or installed_locales
        self.environ = environ if environ is not None else os.environ
        self.env_var = env_var
        self._entries: Mapping[str, str] | None = None
        self._lock = threading.Lock()

    @property
    def is_built(self) -> bool:
        return self._entries is not None

    def get(self) -> Mapping[str, str]:
        """Return the table, building it on first call."""
        with self._lock:
            if self._entries is None:
                table = build_locale_table(self.source(), self.environ.get(self.env_var))
                logger.info("Built likely-locale table with %d entries", len(table))
                self._entries = MappingProxyType(table)
            return self._entries

    def reset(self) -> None:
        """Forget the built table so the next get() rebuilds it."""
        with self._lock:
            self._entries = None


_default_table = LocaleTable()


def get_locale_table() -> LocaleTable:
    """Return the process-wide default LocaleTable."""
    return _default_table


# =============================================================================
# RESOLVER
# =============================================================================


class LocaleResolver:
    """
    Resolves a language to the locale whose dictionary should be used.

    Example:
        >>> resolver = LocaleResolver()
        >>> resolver.likely_locale_for("de")
        'de-DE'
    """

    def __init__(
        self,
        table: LocaleTable | None = None,
        fallback: Mapping[str, str] = FALLBACK_LOCALES,
    ) -> None:
        self.table = table or get_locale_table()
        self.fallback = fallback

    def likely_locale_for(self, language: str) -> str:
        """
        Return the most likely locale for a language.

        Consults the host-derived table first, then the fallback table.

        Args:
            language: Two-letter language code (case-insensitive).

        Raises:
            UnknownLanguage: If neither table has the language.
        """
        language = language.lower()
        entries = self.table.get()
        if language in entries:
            return entries[language]
        if language in self.fallback:
            return self.fallback[language]
        raise UnknownLanguage(language)
