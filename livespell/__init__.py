"""
livespell: adaptive, language-aware spell checking for text editors.

livespell watches what the user types, works out which language they
are writing in, fetches and caches the matching dictionary, and answers
"is this word misspelled" quickly while they type.

Example:
    >>> import livespell
    >>> session = livespell.SpellCheckSession()
    >>> session.switch_language("en-US")
    >>> session.is_misspelled("recieve")
    True
    >>> source = session.attach_to_input()
    >>> source.emit("Dies ist offensichtlich ein deutscher Text")  # switches to de-DE
    >>> session.dispose()

Logging goes to the "livespell" logger; configure it in the host application.
"""

import logging

from livespell.config import (
    DetectionConfig,
    DictionaryConfig,
    OracleConfig,
    SpellCheckConfig,
    load_config,
)
from livespell.detection import (
    LangdetectGuesser,
    LanguageDetectionPipeline,
    LanguageGuesser,
    Scheduler,
    ThreadingScheduler,
    VirtualScheduler,
)
from livespell.dictionaries import AlternatesMemo, DictionaryStore, dictionary_url_for
from livespell.exceptions import (
    ConfigurationError,
    CorruptDownload,
    DetectionUnreliable,
    DictionaryCacheError,
    DictionaryError,
    DownloadFailed,
    InvalidLocaleFormat,
    LiveSpellError,
    UnknownLanguage,
)
from livespell.locales import (
    FALLBACK_LOCALES,
    LocaleResolver,
    LocaleTable,
    build_locale_table,
    normalize_locale_code,
)
from livespell.models import (
    DetectionResult,
    LanguageCandidate,
    MisspelledSpan,
    PipelineState,
    SwitchResult,
)
from livespell.session import SpellCheckSession
from livespell.signals import Signal
from livespell.spelling import (
    MisspellingOracle,
    NullSpellingEngine,
    PySpellCheckerEngine,
    SpellingEngine,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    # Main API
    "SpellCheckSession",
    "normalize_locale_code",
    # Configuration
    "SpellCheckConfig",
    "DictionaryConfig",
    "DetectionConfig",
    "OracleConfig",
    "load_config",
    # Components
    "DictionaryStore",
    "AlternatesMemo",
    "dictionary_url_for",
    "LocaleResolver",
    "LocaleTable",
    "build_locale_table",
    "FALLBACK_LOCALES",
    "MisspellingOracle",
    "LanguageDetectionPipeline",
    "Signal",
    # Engines
    "SpellingEngine",
    "PySpellCheckerEngine",
    "NullSpellingEngine",
    "LanguageGuesser",
    "LangdetectGuesser",
    # Schedulers
    "Scheduler",
    "ThreadingScheduler",
    "VirtualScheduler",
    # Models
    "DetectionResult",
    "LanguageCandidate",
    "MisspelledSpan",
    "PipelineState",
    "SwitchResult",
    # Exceptions
    "LiveSpellError",
    "ConfigurationError",
    "InvalidLocaleFormat",
    "DictionaryError",
    "DownloadFailed",
    "CorruptDownload",
    "DictionaryCacheError",
    "UnknownLanguage",
    "DetectionUnreliable",
]
