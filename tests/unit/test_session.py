"""
Tests for SpellCheckSession.

Sessions run on the fake download session and a virtual clock from
conftest, with the real pyspellchecker engine on generated dictionaries.
"""

import gzip
import logging
import random
from unittest.mock import patch

import pytest

from livespell.config import SpellCheckConfig
from livespell.exceptions import InvalidLocaleFormat
from livespell.locales.resolver import LocaleResolver, LocaleTable
from livespell.models import PipelineState
from livespell.session import SpellCheckSession
from livespell.spelling.engine import NullSpellingEngine


@pytest.fixture
def changes(session):
    """Record every spellchecker_changed emission."""
    emitted = []
    session.spellchecker_changed.connect(emitted.append)
    return emitted


class TestSwitchLanguage:
    """Test switch_language() and the candidate chain."""

    def test_exact_locale(self, session, changes):
        """A full locale is loaded directly."""
        result = session.switch_language("de-DE")

        assert result.locale == "de-DE"
        assert result.dictionary_loaded
        assert result.changed
        assert session.current_locale == "de-DE"
        assert changes == ["de-DE"]

    def test_dictionary_answers_queries(self, session):
        """Words are checked against the loaded dictionary."""
        session.switch_language("de_de")
        assert not session.is_misspelled("Eimer")
        assert session.is_misspelled("bucket")

    def test_idempotent(self, session, store, changes):
        """Repeating a switch acquires once and announces once."""
        with patch.object(store, "acquire", wraps=store.acquire) as acquire:
            first = session.switch_language("de-DE")
            second = session.switch_language("de-DE")

        assert acquire.call_count == 1
        assert first.changed and not second.changed
        assert second.locale == "de-DE"
        assert changes == ["de-DE"]

    def test_language_hint_uses_fallback(self, session, alternates):
        """A bare language resolves through the fallback table."""
        result = session.switch_language("de")

        assert result.requested == "de"
        assert result.locale == "de-DE"
        assert alternates.get("de") == "de-DE"

    def test_regional_variant_falls_back(self, session, fake_http):
        """An unavailable regional dictionary falls back to the language default."""
        result = session.switch_language("de-AT")

        assert result.locale == "de-DE"
        assert fake_http.requests == [
            "https://dicts.test/de-AT.json.gz",
            "https://dicts.test/de-DE.json.gz",
        ]

    def test_host_table_preferred(self, dictionary_config, store, guesser, scheduler, alternates):
        """An installed host locale wins over the fallback table."""
        resolver = LocaleResolver(LocaleTable(source=lambda: ["en_GB.UTF-8"], environ={}))
        with SpellCheckSession(
            config=SpellCheckConfig(dictionaries=dictionary_config),
            store=store,
            resolver=resolver,
            guesser=guesser,
            scheduler=scheduler,
            alternates=alternates,
        ) as session:
            assert session.switch_language("en").locale == "en-GB"

    def test_remembered_locale_goes_first(self, session, alternates, fake_http):
        """A remembered hint skips the chain."""
        alternates.set("en", "en-GB")
        result = session.switch_language("en")

        assert result.locale == "en-GB"
        assert fake_http.requests == ["https://dicts.test/en-GB.json.gz"]

    def test_remembered_failure_retries_chain(self, session, alternates):
        """A remembered locale that fails is forgotten and the chain is retried."""
        alternates.set("en", "en-AU")
        result = session.switch_language("en")

        assert result.locale == "en-US"
        assert alternates.get("en") == "en-US"

    def test_invalid_hint(self, session):
        """Hints that are not language codes raise."""
        with pytest.raises(InvalidLocaleFormat):
            session.switch_language("english")

    def test_unknown_language_without_dictionary(self, session, changes):
        """A language nobody knows leaves the session without a dictionary."""
        result = session.switch_language("xx")

        assert not result.dictionary_loaded
        assert result.locale == "xx"
        assert changes == ["xx"]


class TestFailOpen:
    """Sessions without a dictionary never report misspellings."""

    def test_no_dictionary_available(self, session, changes, caplog):
        """A failed switch reports the hint and passes every word."""
        with caplog.at_level(logging.WARNING, logger="livespell"):
            result = session.switch_language("fr")

        assert not result.dictionary_loaded
        assert result.locale == "fr"
        assert session.current_locale == "fr"
        assert not session.has_dictionary
        assert not session.is_misspelled("xyzzy")
        assert session.check_spelling("xyzzy plugh") == []
        assert session.get_corrections_for_misspelling("xyzzy") == []
        assert changes == ["fr"]
        assert "No dictionary available for fr" in caplog.text

    def test_repeated_failure_announced_once(self, session, changes):
        session.switch_language("fr")
        session.switch_language("fr")
        assert changes == ["fr"]

    def test_failure_drops_previous_dictionary(self, session, changes):
        """Switching to an unavailable locale stops using the old dictionary."""
        session.switch_language("de-DE")
        session.switch_language("fr-FR")

        assert session.current_locale == "fr-FR"
        assert not session.is_misspelled("bucket")
        assert changes == ["de-DE", "fr-FR"]

    def test_before_any_switch(self, session):
        assert session.current_locale is None
        assert not session.is_misspelled("xyzzy")
        assert session.add_to_dictionary("xyzzy") is False

    def test_unreadable_cache_is_evicted(self, session, store, fake_http):
        """A cached dictionary that cannot be parsed is deleted and fetched again next time."""
        garbled = gzip.compress(b"{}")[:10] + random.Random(0).randbytes(20000)
        target = store.path_for("en-US")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(garbled)

        result = session.switch_language("en-US")

        assert not result.dictionary_loaded
        assert not target.exists()
        assert fake_http.requests == []

        result = session.switch_language("en-US")

        assert result.dictionary_loaded
        assert fake_http.requests == ["https://dicts.test/en-US.json.gz"]
        assert not session.is_misspelled("bucket")

    def test_detection_does_not_retry_failed_language(
        self, session, guesser, scheduler, fake_http
    ):
        """Repeated detections of a language without a dictionary download once."""
        guesser.language = "ja"
        source = session.attach_to_input()

        for i in range(5):
            source.emit("これは日本語の文章です" * (i + 1))
            scheduler.advance(1.0)

        assert session.current_locale == "ja"
        assert not session.has_dictionary
        assert fake_http.requests.count("https://dicts.test/ja-JP.json.gz") == 1

    def test_explicit_switch_retries_failed_language(self, session, fake_http, english_blob):
        """switch_language() tries again even when detection would not."""
        session.switch_language("fr")
        fake_http.bodies["https://dicts.test/fr-FR.json.gz"] = english_blob

        assert session.switch_language("fr").dictionary_loaded


class TestQueries:
    """Test the query operations on an active dictionary."""

    def test_check_spelling(self, session):
        session.switch_language("de-DE")
        text = "Das ist ein bucket"
        assert [s.word(text) for s in session.check_spelling(text)] == ["bucket"]

    def test_corrections(self, session):
        session.switch_language("de-DE")
        assert "Eimer" in session.get_corrections_for_misspelling("Eimr")

    def test_add_to_dictionary(self, session):
        """Learned words stop being misspelled."""
        session.switch_language("en-US")
        assert session.is_misspelled("livespell")
        assert session.add_to_dictionary("livespell") is True
        assert not session.is_misspelled("livespell")

    def test_signals(self, session):
        """Queries publish invoked and misspelled signals."""
        invoked, errors = [], []
        session.spell_check_invoked.connect(invoked.append)
        session.spelling_error_occurred.connect(errors.append)
        session.switch_language("en-US")

        session.is_misspelled("bucket")
        session.is_misspelled("bukket")

        assert invoked == ["bucket", "bukket"]
        assert errors == ["bukket"]

    def test_null_engine(self, dictionary_config, store, resolver, guesser, scheduler):
        """Hosts with native checking can plug in the null engine."""
        with SpellCheckSession(
            config=SpellCheckConfig(dictionaries=dictionary_config),
            store=store,
            resolver=resolver,
            guesser=guesser,
            engine_factory=NullSpellingEngine,
            scheduler=scheduler,
        ) as session:
            assert session.switch_language("en-US").dictionary_loaded
            assert not session.is_misspelled("bukket")
            assert session.add_to_dictionary("bukket") is False


class TestHintText:
    """Test provide_hint_text()."""

    def test_switches_to_detected_language(self, session, guesser):
        guesser.language = "de"
        result = session.provide_hint_text("Das ist ein Eimer voll Wasser")
        assert result.locale == "de-DE"

    def test_unreliable_sample(self, session, guesser):
        """An unreliable sample changes nothing."""
        guesser.reliability = 40
        assert session.provide_hint_text("???") is None
        assert session.current_locale is None


class TestInputAttachment:
    """Test attach_to_input() wiring the pipeline to switching."""

    def test_detects_and_switches(self, session, guesser, scheduler, changes):
        """Typing in a language switches to its dictionary once input settles."""
        guesser.language = "de"
        source = session.attach_to_input()

        source.emit("Das ist")
        source.emit("Das ist ein Eimer")
        scheduler.advance(1.0)

        assert session.current_locale == "de-DE"
        assert guesser.samples == ["Das ist ein Eimer"]
        assert session.pipeline.state is PipelineState.ATTACHED
        assert changes == ["de-DE"]

    def test_misspelling_rechecks_language(self, session, guesser, scheduler):
        """A misspelling while attached re-runs detection and can switch."""
        guesser.language = "de"
        source = session.attach_to_input()
        source.emit("Das ist ein Eimer")
        scheduler.advance(1.0)

        guesser.language = "en"
        source.emit("this is a bucket")
        assert session.is_misspelled("bucket")
        scheduler.advance(1.0)

        assert session.current_locale == "en-US"

    def test_uses_given_source(self, session):
        """An existing input signal is reused."""
        from livespell.signals import Signal

        source = Signal("field")
        assert session.attach_to_input(source) is source
        assert len(source) == 1

    def test_reattach_replaces_pipeline(self, session):
        first = session.attach_to_input()
        pipeline = session.pipeline
        session.attach_to_input()

        assert len(first) == 0
        assert session.pipeline is not pipeline


class TestLifecycle:
    """Test suspend(), resume() and dispose()."""

    def test_suspend_and_resume(self, session, fake_http):
        """Suspend unloads the dictionary; resume reloads it from cache."""
        session.switch_language("de-DE")
        session.suspend()

        assert not session.has_dictionary
        assert not session.is_misspelled("bucket")

        result = session.resume()

        assert result.locale == "de-DE"
        assert session.is_misspelled("bucket")
        assert len(fake_http.requests) == 1

    def test_resume_without_suspend(self, session):
        assert session.resume() is None

    def test_dispose_disconnects_input(self, session, guesser, scheduler):
        """After dispose, input is ignored."""
        source = session.attach_to_input()
        session.dispose()

        source.emit("Das ist ein Eimer")
        scheduler.advance(1.0)

        assert session.disposed
        assert len(source) == 0
        assert guesser.samples == []
        assert session.pipeline is None

    def test_dispose_twice(self, session):
        session.dispose()
        session.dispose()
        assert session.disposed

    def test_attach_after_dispose(self, session, guesser, scheduler):
        """A disposed session hands back the source without listening to it."""
        session.dispose()
        source = session.attach_to_input()

        source.emit("Das ist ein Eimer")
        scheduler.advance(1.0)

        assert len(source) == 0
        assert session.pipeline is None
        assert guesser.samples == []

    def test_switch_finishing_after_dispose_is_discarded(self, session, store, changes):
        """A switch in flight when the session is disposed changes nothing."""
        real_acquire = store.acquire

        def acquire_then_dispose(locale, cache_only=False):
            blob = real_acquire(locale, cache_only)
            session.dispose()
            return blob

        with patch.object(store, "acquire", side_effect=acquire_then_dispose):
            result = session.switch_language("de-DE")

        assert not result.changed
        assert session.current_locale is None
        assert changes == []

    def test_failing_listener_does_not_break_switch(self, session):
        """A broken spellchecker_changed handler does not undo the switch."""

        def broken(locale):
            raise RuntimeError("listener failed")

        session.spellchecker_changed.connect(broken)
        assert session.switch_language("de-DE").dictionary_loaded
        assert session.current_locale == "de-DE"
