"""
Locale handling: normalization, fallback defaults and host-aware resolution.

Example:
    >>> from livespell.locales import LocaleResolver, normalize_locale_code
    >>> normalize_locale_code("en_us")
    'en-US'
    >>> LocaleResolver().likely_locale_for("pt")
    'pt-BR'
"""

from livespell.locales.fallback import FALLBACK_LOCALES, fallback_locale_for
from livespell.locales.normalize import (
    is_locale_code,
    language_of,
    matches_word,
    normalize_locale_code,
)
from livespell.locales.resolver import (
    LocaleResolver,
    LocaleTable,
    build_locale_table,
    get_locale_table,
    installed_locales,
)

__all__ = [
    # Normalization
    "normalize_locale_code",
    "is_locale_code",
    "language_of",
    "matches_word",
    # Fallback
    "FALLBACK_LOCALES",
    "fallback_locale_for",
    # Resolution
    "LocaleResolver",
    "LocaleTable",
    "build_locale_table",
    "get_locale_table",
    "installed_locales",
]
