"""
Language guessing: which language is a text sample written in.

The pipeline and session only rely on the LanguageGuesser interface.
LangdetectGuesser is the default, backed by langdetect (a port of
Google's language-detection library) seeded for deterministic results.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from langdetect import DetectorFactory, detect_langs
from langdetect.lang_detect_exception import LangDetectException

from livespell.exceptions import DetectionUnreliable, InvalidLocaleFormat
from livespell.locales.normalize import language_of
from livespell.models import DetectionResult, LanguageCandidate

logger = logging.getLogger(__name__)

# Make language detection deterministic
DetectorFactory.seed = 0

DEFAULT_MIN_RELIABILITY = 85


class LanguageGuesser(ABC):
    """Native language-guess capability."""

    @abstractmethod
    def detect(self, text: str) -> DetectionResult:
        """
        Guess the language of a text sample.

        Raises:
            DetectionUnreliable: If no guess can be made at all.
        """

    def detect_reliable(self, text: str, min_reliability: int = DEFAULT_MIN_RELIABILITY) -> str:
        """
        Return the guessed language code, accepting only reliable results.

        Raises:
            DetectionUnreliable: If the guess is missing, flagged unreliable,
                or its top candidate is below min_reliability.
        """
        result = self.detect(text)
        if not result.is_acceptable(min_reliability):
            raise DetectionUnreliable(
                f"Not enough reliable text: {result.language or 'nothing'} "
                f"at {result.reliability}% (reliable={result.reliable})"
            )
        return result.language


class LangdetectGuesser(LanguageGuesser):
    """
    LanguageGuesser backed by langdetect.

    langdetect reports probabilities rather than a reliability flag; a
    guess is marked reliable when its top candidate holds the majority.

    Example:
        >>> LangdetectGuesser().detect_reliable("Das ist ein ganz normaler deutscher Satz.")
        'de'
    """

    def detect(self, text: str) -> DetectionResult:
        try:
            ranked = detect_langs(text)
        except LangDetectException as e:
            raise DetectionUnreliable(f"langdetect could not guess: {e}") from e

        candidates = []
        for guess in ranked:
            try:
                code = language_of(guess.lang)
            except InvalidLocaleFormat:
                continue
            candidates.append(LanguageCandidate(code=code, percent=round(guess.prob * 100)))

        if not candidates:
            raise DetectionUnreliable("langdetect returned no usable candidates")

        top = candidates[0]
        others = sum(c.percent for c in candidates[1:])
        logger.debug("Language guess %s", candidates)
        return DetectionResult(
            language=top.code,
            reliability=top.percent,
            reliable=top.percent > others,
            alternates=candidates[1:],
        )


def supported_languages() -> set[str]:
    """Return the two-letter codes langdetect can report."""
    from langdetect import detector_factory

    detector_factory.init_factory()
    return {language_of(code) for code in detector_factory._factory.get_lang_list()}
