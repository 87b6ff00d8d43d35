"""
Exception classes for livespell.

All livespell exceptions inherit from LiveSpellError,
making it easy to catch all library errors.

Example:
    >>> try:
    ...     store.acquire("de-DE")
    ... except livespell.DownloadFailed as e:
    ...     print(f"Could not fetch dictionary: {e}")
    ... except livespell.LiveSpellError as e:
    ...     print(f"livespell error: {e}")
"""

from __future__ import annotations


class LiveSpellError(Exception):
    """
    Base exception for all livespell errors.

    Catch this to handle any livespell-specific error.
    """

    pass


class ConfigurationError(LiveSpellError, ValueError):
    """
    Raised for invalid configuration.

    Example:
        >>> DetectionConfig(min_reliability=120)
        ConfigurationError: min_reliability must be between 0 and 100, got 120
    """

    pass


class InvalidLocaleFormat(LiveSpellError, ValueError):
    """
    Raised when a language code cannot be normalized to ``xx-YY``.

    This is always an input or programming error and is never retried.

    Example:
        >>> normalize_locale_code("english")
        InvalidLocaleFormat: 'english' is not a valid language code
    """

    def __init__(self, code: str) -> None:
        super().__init__(f"{code!r} is not a valid language code")
        self.code = code


class DictionaryError(LiveSpellError):
    """
    Raised when a dictionary cannot be acquired or loaded.

    The session recovers from these by moving on to the next candidate
    locale; only direct DictionaryStore callers see them.
    """

    pass


class DownloadFailed(DictionaryError):
    """Raised when the remote dictionary source cannot be fetched."""

    def __init__(self, locale: str, url: str, reason: str) -> None:
        super().__init__(f"Unable to download {locale} from {url}: {reason}")
        self.locale = locale
        self.url = url


class CorruptDownload(DictionaryError):
    """
    Raised when a freshly downloaded dictionary is implausibly small.

    A dictionary below the minimum valid size is treated as a broken
    download, never as a legitimately empty dictionary.
    """

    def __init__(self, locale: str, size: int) -> None:
        super().__init__(f"Dictionary for {locale} is only {size} bytes, most likely bogus")
        self.locale = locale
        self.size = size


class DictionaryCacheError(DictionaryError):
    """Raised when the cache directory cannot be created or written."""

    pass


class UnknownLanguage(LiveSpellError, LookupError):
    """Raised when neither the locale table nor the fallback table knows a language."""

    def __init__(self, language: str) -> None:
        super().__init__(f"No locale known for language {language!r}")
        self.language = language


class DetectionUnreliable(LiveSpellError):
    """
    Raised when a language guess is missing or below the reliability threshold.

    The detection pipeline swallows this; it is never surfaced to the
    editing surface.
    """

    pass
