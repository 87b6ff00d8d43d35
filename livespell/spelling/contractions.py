"""
English contractions and their stems.

Some spell checkers split "don't" into "don" + "t" and then flag the
stem as misspelled. Neither the full contraction nor its stem is ever
reported as a misspelling.
"""

from __future__ import annotations

CONTRACTIONS = frozenset(
    {
        "ain't",
        "aren't",
        "can't",
        "could've",
        "couldn't",
        "couldn't've",
        "didn't",
        "doesn't",
        "don't",
        "hadn't",
        "hadn't've",
        "hasn't",
        "haven't",
        "he'd",
        "he'd've",
        "he'll",
        "he's",
        "how'd",
        "how'll",
        "how's",
        "i'd",
        "i'd've",
        "i'll",
        "i'm",
        "i've",
        "isn't",
        "it'd",
        "it'd've",
        "it'll",
        "it's",
        "let's",
        "ma'am",
        "mightn't",
        "mightn't've",
        "might've",
        "mustn't",
        "must've",
        "needn't",
        "not've",
        "o'clock",
        "shan't",
        "she'd",
        "she'd've",
        "she'll",
        "she's",
        "should've",
        "shouldn't",
        "shouldn't've",
        "that'll",
        "that's",
        "there'd",
        "there'd've",
        "there're",
        "there's",
        "they'd",
        "they'd've",
        "they'll",
        "they're",
        "they've",
        "wasn't",
        "we'd",
        "we'd've",
        "we'll",
        "we're",
        "we've",
        "weren't",
        "what'll",
        "what're",
        "what's",
        "what've",
        "when's",
        "where'd",
        "where's",
        "where've",
        "who'd",
        "who'll",
        "who're",
        "who's",
        "who've",
        "why'll",
        "why're",
        "why's",
        "won't",
        "would've",
        "wouldn't",
        "wouldn't've",
        "y'all",
        "y'all'd've",
        "you'd",
        "you'd've",
        "you'll",
        "you're",
        "you've",
    }
)

CONTRACTION_STEMS = frozenset(c.split("'", 1)[0] for c in CONTRACTIONS)


def is_contraction(word: str) -> bool:
    """
    Whether a word is a known contraction or contraction stem.

    Case-insensitive; typographic apostrophes are treated like ASCII ones.

    Example:
        >>> is_contraction("Don’t")
        True
        >>> is_contraction("couldn")
        True
    """
    w = word.lower().replace("’", "'")
    return w in CONTRACTIONS or w in CONTRACTION_STEMS
