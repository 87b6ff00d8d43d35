"""
Spelling engines: the capability that actually knows words.

The oracle and session only talk to the SpellingEngine interface. The
default PySpellCheckerEngine is backed by pyspellchecker and reads the
gzip-compressed JSON word-frequency files pyspellchecker publishes.
NullSpellingEngine is the disabled engine: nothing is misspelled and
there are no corrections.
"""

from __future__ import annotations

import gzip
import json
import logging
import zlib
from abc import ABC, abstractmethod
from pathlib import Path

from spellchecker import SpellChecker

from livespell.exceptions import DictionaryError
from livespell.locales.normalize import WORD_PATTERN
from livespell.models import MisspelledSpan

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"


# =============================================================================
# INTERFACE
# =============================================================================


class SpellingEngine(ABC):
    """Native spell-check capability for one dictionary at a time."""

    # Whether add() can teach the engine new words on this platform
    can_learn: bool = True

    @abstractmethod
    def set_dictionary(self, locale: str, blob: bytes | Path) -> None:
        """
        Load the dictionary for a locale from its raw bytes or cache file.

        Raises:
            DictionaryError: If the blob cannot be parsed.
        """

    @abstractmethod
    def is_misspelled(self, word: str) -> bool: ...

    @abstractmethod
    def get_corrections_for_misspelling(self, word: str) -> list[str]: ...

    @abstractmethod
    def add(self, word: str) -> bool:
        """Teach the engine a word. Returns False if learning is unsupported."""

    @abstractmethod
    def available_dictionaries(self) -> list[str]: ...

    def check_spelling(self, text: str) -> list[MisspelledSpan]:
        """Return the spans of misspelled words in text."""
        return [
            MisspelledSpan(m.start(), m.end())
            for m in WORD_PATTERN.finditer(text)
            if self.is_misspelled(m.group(0))
        ]


class NullSpellingEngine(SpellingEngine):
    """Engine used when spell checking is unavailable: never flags anything."""

    can_learn = False

    def set_dictionary(self, locale: str, blob: bytes | Path) -> None:
        pass

    def is_misspelled(self, word: str) -> bool:
        return False

    def get_corrections_for_misspelling(self, word: str) -> list[str]:
        return []

    def add(self, word: str) -> bool:
        return False

    def available_dictionaries(self) -> list[str]:
        return []

    def check_spelling(self, text: str) -> list[MisspelledSpan]:
        return []


# =============================================================================
# PYSPELLCHECKER ENGINE
# =============================================================================


def parse_word_frequencies(blob: bytes | Path) -> dict[str, int]:
    """
    Parse a pyspellchecker word-frequency dictionary.

    Accepts gzip-compressed or plain JSON, as bytes or as a file path.

    Raises:
        DictionaryError: If the data is not a JSON object of word counts.
    """
    try:
        raw = Path(blob).read_bytes() if isinstance(blob, Path) else bytes(blob)
        if raw[:2] == GZIP_MAGIC:
            raw = gzip.decompress(raw)
        data = json.loads(raw.decode("utf-8"))
    except (OSError, EOFError, ValueError, zlib.error) as e:
        raise DictionaryError(f"Unreadable dictionary: {e}") from e

    if not isinstance(data, dict):
        raise DictionaryError(f"Dictionary must be a JSON object, got {type(data).__name__}")
    return data


class PySpellCheckerEngine(SpellingEngine):
    """
    SpellingEngine backed by pyspellchecker.

    Attributes:
        distance: Edit distance used when searching for corrections.

    Example:
        >>> engine = PySpellCheckerEngine()
        >>> engine.set_dictionary("en-US", store.acquire("en-US"))
        >>> engine.is_misspelled("speling")
        True
        >>> engine.get_corrections_for_misspelling("speling")
        ['spelling', ...]
    """

    def __init__(self, distance: int = 2) -> None:
        self.distance = distance
        self.locale: str | None = None
        self._spell: SpellChecker | None = None

    def set_dictionary(self, locale: str, blob: bytes | Path) -> None:
        frequencies = parse_word_frequencies(blob)
        spell = SpellChecker(language=None, distance=self.distance)
        spell.word_frequency.load_json(frequencies)
        self._spell = spell
        self.locale = locale
        logger.debug("Loaded %d words for %s", len(frequencies), locale)

    def is_misspelled(self, word: str) -> bool:
        if self._spell is None or not WORD_PATTERN.search(word):
            return False
        return word not in self._spell

    def get_corrections_for_misspelling(self, word: str) -> list[str]:
        if self._spell is None:
            return []
        candidates = self._spell.candidates(word) or set()
        counts = self._spell.word_frequency.dictionary
        w = word.lower()
        return sorted(
            (c for c in candidates if c != w),
            key=lambda c: (-counts.get(c, 0), c),
        )

    def add(self, word: str) -> bool:
        if self._spell is None:
            return False
        self._spell.word_frequency.add(word)
        return True

    def available_dictionaries(self) -> list[str]:
        return [self.locale] if self.locale else []
