"""Remote dictionary source: where to download a locale's dictionary from."""

from __future__ import annotations

from livespell.config import DEFAULT_DICTIONARY_URL
from livespell.locales.normalize import normalize_locale_code


def dictionary_url_for(locale: str, template: str = DEFAULT_DICTIONARY_URL) -> str:
    """
    Return the download URL for a locale's dictionary.

    The template may use ``{locale}`` ('en-US'), ``{language}`` ('en'),
    ``{region}`` ('US') and ``{locale_lower}`` ('en-us').

    Example:
        >>> dictionary_url_for("de-AT", "https://dicts.example/{locale_lower}.json.gz")
        'https://dicts.example/de-at.json.gz'
    """
    locale = normalize_locale_code(locale)
    language, region = locale.split("-")
    return template.format(
        locale=locale,
        language=language,
        region=region,
        locale_lower=locale.lower(),
    )
