"""
Spell checking: engines and the memoized misspelling oracle.

Example:
    >>> from livespell.spelling import MisspellingOracle, PySpellCheckerEngine
    >>> engine = PySpellCheckerEngine()
    >>> engine.set_dictionary("en-US", blob)
    >>> MisspellingOracle(engine, "en-US").is_misspelled("recieve")
    True
"""

from livespell.spelling.contractions import CONTRACTION_STEMS, CONTRACTIONS, is_contraction
from livespell.spelling.engine import (
    NullSpellingEngine,
    PySpellCheckerEngine,
    SpellingEngine,
    parse_word_frequencies,
)
from livespell.spelling.oracle import MisspellingOracle

__all__ = [
    # Oracle
    "MisspellingOracle",
    # Engines
    "SpellingEngine",
    "PySpellCheckerEngine",
    "NullSpellingEngine",
    "parse_word_frequencies",
    # Contractions
    "CONTRACTIONS",
    "CONTRACTION_STEMS",
    "is_contraction",
]
