"""
Language code normalization.

Different platforms spell language codes differently ('en_US', 'en-us',
'en_US.UTF-8' from `locale -a`). Everything in livespell works on the
canonical ``xx-YY`` form produced here, so every locale value in the
system is guaranteed well-formed.
"""

from __future__ import annotations

import re

from livespell.exceptions import InvalidLocaleFormat

LANGUAGE_PATTERN = re.compile(r"^[a-z]{2}$")
REGION_PATTERN = re.compile(r"^[A-Z]{2}$")
SEPARATOR_PATTERN = re.compile(r"[-_]")

# Unicode-aware word: letters from any script, optionally joined by apostrophes
WORD_PATTERN = re.compile(r"[^\W\d_]+(?:['’][^\W\d_]+)*")


def normalize_locale_code(code: str) -> str:
    """
    Normalize a language code by case and separator.

    Args:
        code: A code like 'en-us', 'en_US' or 'EN-us'.

    Returns:
        The canonical form, e.g. 'en-US'.

    Raises:
        InvalidLocaleFormat: If either part is not exactly two Latin letters.

    Example:
        >>> normalize_locale_code("de_de")
        'de-DE'
    """
    parts = SEPARATOR_PATTERN.split(code.strip(), maxsplit=1)
    if len(parts) != 2:
        raise InvalidLocaleFormat(code)

    language, region = parts[0].lower(), parts[1].upper()
    if not LANGUAGE_PATTERN.match(language) or not REGION_PATTERN.match(region):
        raise InvalidLocaleFormat(code)

    return f"{language}-{region}"


def is_locale_code(code: str) -> bool:
    """Whether the code normalizes to a full ``xx-YY`` locale."""
    try:
        normalize_locale_code(code)
    except InvalidLocaleFormat:
        return False
    return True


def language_of(code: str) -> str:
    """
    Return the two-letter language prefix of a language or locale code.

    Accepts bare languages ('en'), locales ('en-US') and detector codes
    with script/region suffixes ('zh-cn').

    Raises:
        InvalidLocaleFormat: If the code does not start with two Latin letters.
    """
    language = SEPARATOR_PATTERN.split(code.strip(), maxsplit=1)[0].lower()
    if not LANGUAGE_PATTERN.match(language):
        raise InvalidLocaleFormat(code)
    return language


def matches_word(text: str) -> list[str] | None:
    """
    Return the words found in text, or None if there are none.

    Works for any script that has letters (Latin, Cyrillic, Arabic, CJK).

    Example:
        >>> matches_word("Москва")
        ['Москва']
        >>> matches_word("!@#$") is None
        True
    """
    words = WORD_PATTERN.findall(text)
    return words or None
