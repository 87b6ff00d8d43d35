"""
Static fallback table: the "most common" locale for each language.

This is the base case of locale resolution. It covers every language
the language guesser can report, so a reliable guess always has at
least one candidate dictionary. The table is read-only.
"""

from __future__ import annotations

from types import MappingProxyType

FALLBACK_LOCALES = MappingProxyType(
    {
        "af": "af-ZA",
        "ar": "ar-SA",
        "bg": "bg-BG",
        "bn": "bn-BD",
        "ca": "ca-ES",
        "cs": "cs-CZ",
        "cy": "cy-GB",
        "da": "da-DK",
        "de": "de-DE",
        "el": "el-GR",
        "en": "en-US",
        "es": "es-ES",
        "et": "et-EE",
        "eu": "eu-ES",
        "fa": "fa-IR",
        "fi": "fi-FI",
        "fo": "fo-FO",
        "fr": "fr-FR",
        "ga": "ga-IE",
        "gl": "gl-ES",
        "gu": "gu-IN",
        "he": "he-IL",
        "hi": "hi-IN",
        "hr": "hr-HR",
        "hu": "hu-HU",
        "hy": "hy-AM",
        "id": "id-ID",
        "is": "is-IS",
        "it": "it-IT",
        "ja": "ja-JP",
        "ka": "ka-GE",
        "kk": "kk-KZ",
        "kn": "kn-IN",
        "ko": "ko-KR",
        "lt": "lt-LT",
        "lv": "lv-LV",
        "mk": "mk-MK",
        "ml": "ml-IN",
        "mr": "mr-IN",
        "ms": "ms-MY",
        "nb": "nb-NO",
        "ne": "ne-NP",
        "nl": "nl-NL",
        "nn": "nn-NO",
        "no": "nb-NO",
        "pa": "pa-IN",
        "pl": "pl-PL",
        "pt": "pt-BR",
        "ro": "ro-RO",
        "ru": "ru-RU",
        "sh": "sh-RS",
        "sk": "sk-SK",
        "sl": "sl-SI",
        "so": "so-SO",
        "sq": "sq-AL",
        "sr": "sr-RS",
        "sv": "sv-SE",
        "sw": "sw-KE",
        "ta": "ta-IN",
        "te": "te-IN",
        "tg": "tg-TJ",
        "th": "th-TH",
        "tl": "tl-PH",
        "tr": "tr-TR",
        "uk": "uk-UA",
        "ur": "ur-PK",
        "vi": "vi-VN",
        "zh": "zh-CN",
    }
)


def fallback_locale_for(language: str) -> str | None:
    """Return the built-in default locale for a language, or None."""
    return FALLBACK_LOCALES.get(language.lower())
