"""
Data models shared across livespell components.

These are plain value types; the behavior lives in the components
that produce and consume them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PipelineState(Enum):
    """States of the language detection pipeline for one editing surface."""

    IDLE = "idle"  # No dictionary yet, watching for a burst worth sampling
    SAMPLING = "sampling"  # Enough text seen, awaiting quiet period
    DETECTING = "detecting"  # Calling out to the language guesser
    SWITCHING = "switching"  # Resolving locale and acquiring dictionary
    ATTACHED = "attached"  # Dictionary active, oracle answering queries


@dataclass(frozen=True)
class LanguageCandidate:
    """One ranked candidate from a language guess."""

    code: str  # Two-letter language code
    percent: int  # 0-100


@dataclass
class DetectionResult:
    """
    Result of a language guess.

    Only results that the guesser marks reliable AND whose top candidate
    reaches the reliability threshold are accepted. Everything else is
    treated as a detection failure.
    """

    language: str
    reliability: int  # 0-100, score of the top-ranked candidate
    reliable: bool = True
    alternates: list[LanguageCandidate] = field(default_factory=list)

    def is_acceptable(self, min_reliability: int = 85) -> bool:
        """Whether this guess is good enough to switch languages on."""
        return self.reliable and bool(self.language) and self.reliability >= min_reliability


@dataclass(frozen=True)
class MisspelledSpan:
    """A misspelled range in checked text (``end`` is exclusive)."""

    start: int
    end: int

    def word(self, text: str) -> str:
        """Return the misspelled word from the text it was found in."""
        return text[self.start : self.end]


@dataclass
class SwitchResult:
    """
    Outcome of SpellCheckSession.switch_language().

    Attributes:
        requested: The hint the caller passed in.
        locale: The locale now selected. When no dictionary could be
            loaded this is the requested hint (normalized when it is a
            full locale), reported as selected.
        dictionary_loaded: Whether an oracle with a dictionary is active.
        changed: Whether the session emitted a "spellchecker changed" signal.
    """

    requested: str
    locale: str | None
    dictionary_loaded: bool
    changed: bool
