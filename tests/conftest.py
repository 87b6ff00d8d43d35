"""
Pytest configuration and fixtures for livespell tests.

Nothing here touches the network or the real cache directory: downloads
go through a fake requests session serving in-memory dictionaries, and
time is driven by a VirtualScheduler.
"""

import gzip
import json
import random
import string
from unittest.mock import MagicMock

import pytest
import requests

from livespell.config import DictionaryConfig, SpellCheckConfig
from livespell.detection.guesser import LanguageGuesser
from livespell.detection.scheduler import VirtualScheduler
from livespell.dictionaries.alternates import AlternatesMemo
from livespell.dictionaries.store import DictionaryStore
from livespell.locales.resolver import LocaleResolver, LocaleTable
from livespell.models import DetectionResult
from livespell.session import SpellCheckSession
from livespell.spelling.engine import SpellingEngine

TEST_URL_TEMPLATE = "https://dicts.test/{locale}.json.gz"

ENGLISH_WORDS = [
    "a", "the", "this", "is", "of", "and", "in", "here", "text", "written",
    "english", "bucket", "water", "hello", "world", "house", "receive",
    "spelling", "sentence", "quick", "brown", "fox", "jumps", "over", "lazy", "dog",
]

GERMAN_WORDS = [
    "der", "die", "das", "ist", "ein", "eine", "und", "hier", "text", "deutsch",
    "eimer", "wasser", "haus", "nicht", "mit", "voll", "geschrieben",
]


def make_dictionary_blob(words, padding=3000, seed=0) -> bytes:
    """
    Build a gzip-compressed pyspellchecker word-frequency dictionary.

    Random filler words keep the blob above the minimum valid size.
    """
    rng = random.Random(seed)
    frequencies = {word: 1000 - i for i, word in enumerate(words)}
    while len(frequencies) < len(words) + padding:
        filler = "".join(rng.choice(string.ascii_lowercase) for _ in range(10))
        frequencies.setdefault(filler, 1)
    return gzip.compress(json.dumps(frequencies).encode("utf-8"))


class FakeHttp:
    """Stands in for requests.Session, serving bodies by URL."""

    def __init__(self, bodies: dict[str, bytes]) -> None:
        self.bodies = bodies
        self.requests: list[str] = []

    def get(self, url, headers=None, timeout=None):
        self.requests.append(url)
        if url not in self.bodies:
            raise requests.HTTPError(f"404 Client Error: Not Found for url: {url}")
        response = MagicMock()
        response.content = self.bodies[url]
        response.raise_for_status.return_value = None
        return response


class CountingEngine(SpellingEngine):
    """Case-sensitive engine over a fixed word list that counts lookups."""

    def __init__(self, words=(), corrections=None) -> None:
        self.words = set(words)
        self.corrections = corrections or {}
        self.calls = 0
        self.added: list[str] = []
        self.locale = None

    def set_dictionary(self, locale, blob):
        self.locale = locale

    def is_misspelled(self, word):
        self.calls += 1
        return word not in self.words

    def get_corrections_for_misspelling(self, word):
        return list(self.corrections.get(word, []))

    def add(self, word):
        self.added.append(word)
        self.words.add(word)
        return True

    def available_dictionaries(self):
        return [self.locale] if self.locale else []


class ScriptedGuesser(LanguageGuesser):
    """Guesser that always returns the configured answer and records samples."""

    def __init__(self, language="en", reliability=99, reliable=True) -> None:
        self.language = language
        self.reliability = reliability
        self.reliable = reliable
        self.samples: list[str] = []

    def detect(self, text):
        self.samples.append(text)
        return DetectionResult(self.language, self.reliability, self.reliable)


# =============================================================================
# BUILDING BLOCKS
# =============================================================================


@pytest.fixture(scope="session")
def english_blob() -> bytes:
    return make_dictionary_blob(ENGLISH_WORDS, seed=1)


@pytest.fixture(scope="session")
def german_blob() -> bytes:
    return make_dictionary_blob(GERMAN_WORDS, seed=2)


@pytest.fixture
def fake_http(english_blob, german_blob) -> FakeHttp:
    """Fake session serving en-US, en-GB and de-DE."""
    return FakeHttp(
        {
            TEST_URL_TEMPLATE.format(locale="en-US"): english_blob,
            TEST_URL_TEMPLATE.format(locale="en-GB"): english_blob,
            TEST_URL_TEMPLATE.format(locale="de-DE"): german_blob,
        }
    )


@pytest.fixture
def dictionary_config(tmp_path) -> DictionaryConfig:
    return DictionaryConfig(
        cache_dir=tmp_path / "dictionaries",
        url_template=TEST_URL_TEMPLATE,
        alternates_path=tmp_path / "alternates.json",
    )


@pytest.fixture
def store(dictionary_config, fake_http) -> DictionaryStore:
    return DictionaryStore(dictionary_config, http=fake_http)


@pytest.fixture
def scheduler() -> VirtualScheduler:
    return VirtualScheduler()


@pytest.fixture
def resolver() -> LocaleResolver:
    """Resolver with no host locales installed and no LANG preference."""
    return LocaleResolver(LocaleTable(source=lambda: [], environ={}))


@pytest.fixture
def guesser() -> ScriptedGuesser:
    return ScriptedGuesser()


@pytest.fixture
def guesser_factory():
    """Return the scripted guesser class."""
    return ScriptedGuesser


@pytest.fixture
def engine_factory():
    """Return the counting engine class."""
    return CountingEngine


@pytest.fixture
def alternates(dictionary_config) -> AlternatesMemo:
    return AlternatesMemo(dictionary_config.alternates_path)


@pytest.fixture
def session(dictionary_config, store, resolver, guesser, scheduler, alternates):
    """Session on fake downloads and a virtual clock."""
    spell_session = SpellCheckSession(
        config=SpellCheckConfig(dictionaries=dictionary_config),
        store=store,
        resolver=resolver,
        guesser=guesser,
        scheduler=scheduler,
        alternates=alternates,
    )
    yield spell_session
    spell_session.dispose()
