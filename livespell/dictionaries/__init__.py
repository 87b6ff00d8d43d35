"""
Dictionary acquisition: remote source, on-disk cache and the alternates memo.

Example:
    >>> from livespell.dictionaries import DictionaryStore
    >>> store = DictionaryStore()
    >>> blob = store.acquire("fr-FR")
"""

from livespell.dictionaries.alternates import AlternatesMemo
from livespell.dictionaries.sources import dictionary_url_for
from livespell.dictionaries.store import DictionaryStore

__all__ = [
    "AlternatesMemo",
    "DictionaryStore",
    "dictionary_url_for",
]
