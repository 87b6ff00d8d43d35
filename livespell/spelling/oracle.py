"""
MisspellingOracle: answers "is this word misspelled" for the active locale.

Decision per word (memo miss):
1. Contractions and contraction stems are never misspelled.
2. Without a dictionary every word is spelled correctly (fail open:
   never block typing because no dictionary is loaded yet).
3. Otherwise ask the engine. Engines flag capitalized words at the start
   of a checked span that they accept in lowercase, so a flagged
   sentence-initial word is re-checked in lowercase before the verdict
   stands.

Answers are memoized in a small TTL cache: short enough that a word just
added to the dictionary stops being flagged quickly, long enough that a
word sitting on screen is not re-checked on every repaint.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from collections.abc import Callable
from functools import lru_cache

from cachetools import TTLCache
from wordfreq import available_languages, zipf_frequency

from livespell.config import OracleConfig
from livespell.locales.normalize import language_of
from livespell.models import MisspelledSpan
from livespell.spelling.contractions import is_contraction
from livespell.spelling.engine import SpellingEngine

logger = logging.getLogger(__name__)

SENTENCE_END_PATTERN = re.compile(r"[.!?…]\s*$")


@lru_cache(maxsize=1)
def _frequency_languages() -> frozenset[str]:
    return frozenset(available_languages())


def _is_title_case(word: str) -> bool:
    return word[:1].isupper() and word[1:] == word[1:].lower()


def _match_case(original: str, correction: str) -> str:
    if len(original) > 1 and original.isupper():
        return correction.upper()
    if original[:1].isupper():
        return correction[:1].upper() + correction[1:]
    return correction


class MisspellingOracle:
    """
    Memoized misspelling decisions over one spelling engine.

    Attributes:
        engine: SpellingEngine with the locale's dictionary loaded, or None
            when no dictionary is available.
        locale: Locale the engine's dictionary belongs to.
        config: OracleConfig controlling the memo cache.

    Example:
        >>> oracle = MisspellingOracle(engine, "en-US")
        >>> oracle.is_misspelled("don't")
        False
        >>> oracle.is_misspelled("speling")
        True
    """

    def __init__(
        self,
        engine: SpellingEngine | None,
        locale: str | None = None,
        config: OracleConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_misspelled: Callable[[str], None] | None = None,
        on_invoked: Callable[[str], None] | None = None,
    ) -> None:
        self.engine = engine
        self.locale = locale
        self.config = config or OracleConfig()
        self._on_misspelled = on_misspelled
        self._on_invoked = on_invoked
        self._memo: TTLCache = TTLCache(
            maxsize=self.config.memo_size, ttl=self.config.memo_ttl, timer=clock
        )
        self._lock = threading.Lock()

    @property
    def has_dictionary(self) -> bool:
        return self.engine is not None

    def is_misspelled(self, word: str) -> bool:
        """
        Decide whether a word is misspelled, using the memo when fresh.

        Every call publishes "spell check invoked"; every True verdict
        publishes "misspelling observed".
        """
        if self._on_invoked is not None:
            self._on_invoked(word)

        with self._lock:
            verdict = self._memo.get(word)
        if verdict is None:
            verdict = self._decide(word, sentence_initial=True)
            with self._lock:
                self._memo[word] = verdict

        if verdict and self._on_misspelled is not None:
            self._on_misspelled(word)
        return verdict

    def check_spelling(self, text: str) -> list[MisspelledSpan]:
        """
        Return the misspelled spans in a block of text.

        A word counts as sentence-initial when it starts the text or follows
        sentence-ending punctuation.
        """
        if self._on_invoked is not None:
            self._on_invoked(text)
        if self.engine is None:
            return []

        spans = []
        for span in self.engine.check_spelling(text):
            word = span.word(text)
            sentence_initial = span.start == 0 or bool(
                SENTENCE_END_PATTERN.search(text[: span.start])
            )
            if is_contraction(word):
                continue
            if sentence_initial and _is_title_case(word):
                if not self.engine.is_misspelled(word.lower()):
                    continue
            spans.append(span)
            if self._on_misspelled is not None:
                self._on_misspelled(word)
        return spans

    def get_corrections(self, word: str) -> list[str]:
        """
        Return suggested corrections, most frequent first, re-cased to match.
        """
        if self.engine is None or not word:
            return []

        candidates = self.engine.get_corrections_for_misspelling(word)
        if not candidates:
            candidates = self.engine.get_corrections_for_misspelling(word.lower())

        language = language_of(self.locale) if self.locale else None
        if language in _frequency_languages():
            # Stable sort keeps the engine's order among equally frequent words
            candidates = sorted(candidates, key=lambda c: -zipf_frequency(c, language))

        seen: set[str] = set()
        result = []
        for candidate in candidates:
            cased = _match_case(word, candidate)
            if cased not in seen and cased != word:
                seen.add(cased)
                result.append(cased)
        return result

    def add(self, word: str) -> bool:
        """Teach the engine a word and drop any memoized verdict for it."""
        with self._lock:
            for key in (word, word.lower(), word.capitalize()):
                self._memo.pop(key, None)
        if self.engine is None or not self.engine.can_learn:
            return False
        return self.engine.add(word)

    def clear_memo(self) -> None:
        with self._lock:
            self._memo.clear()

    def _decide(self, word: str, sentence_initial: bool) -> bool:
        if is_contraction(word):
            return False
        if self.engine is None:
            return False
        if not self.engine.is_misspelled(word):
            return False
        if (
            sentence_initial
            and _is_title_case(word)
            and not self.engine.is_misspelled(word.lower())
        ):
            logger.debug("Accepting sentence-initial %r after lowercase re-check", word)
            return False
        return True
