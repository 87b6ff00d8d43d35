"""
SpellCheckSession: the orchestrator for one editing surface.

The session owns the active locale and oracle (it is their only writer),
wires the detection pipeline to locale resolution and dictionary
acquisition, and exposes the operations the editing surface calls.

Switching languages walks a candidate chain for the hint:
1. the hint itself, if it is already a full locale;
2. the likely locale for its language (host table, then fallback table);
3. the fallback table entry for its language.
The first candidate whose dictionary loads wins, and is remembered for
the hint. If every candidate fails the session keeps running without a
dictionary: nothing is reported misspelled until a later switch works.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from livespell.config import SpellCheckConfig
from livespell.detection.guesser import LangdetectGuesser, LanguageGuesser
from livespell.detection.pipeline import LanguageDetectionPipeline
from livespell.detection.scheduler import Scheduler, ThreadingScheduler
from livespell.dictionaries.alternates import AlternatesMemo
from livespell.dictionaries.store import DictionaryStore
from livespell.exceptions import DetectionUnreliable, DictionaryError, UnknownLanguage
from livespell.locales.fallback import fallback_locale_for
from livespell.locales.normalize import is_locale_code, language_of, normalize_locale_code
from livespell.locales.resolver import LocaleResolver, LocaleTable, get_locale_table
from livespell.models import MisspelledSpan, SwitchResult
from livespell.signals import Signal
from livespell.spelling.engine import PySpellCheckerEngine, SpellingEngine
from livespell.spelling.oracle import MisspellingOracle

logger = logging.getLogger(__name__)


class SpellCheckSession:
    """
    Adaptive spell checking for one editing surface.

    Attributes:
        config: SpellCheckConfig for all components.
        store: DictionaryStore that acquires dictionaries.
        resolver: LocaleResolver mapping languages to locales.
        guesser: LanguageGuesser used for detection and hint text.
        scheduler: Scheduler that runs the detection pipeline.
        alternates: AlternatesMemo of hint -> locale that loaded.
        spellchecker_changed: Signal(locale) emitted when the active
            dictionary changes. When no dictionary could be loaded the
            hint is reported as the locale.
        spelling_error_occurred: Signal(word) emitted per misspelling verdict.
        spell_check_invoked: Signal(word_or_text) emitted per query.

    Example:
        >>> session = SpellCheckSession()
        >>> session.switch_language("de-DE")
        >>> session.is_misspelled("Eimer")
        False
        >>> source = session.attach_to_input()
        >>> source.emit("Wie geht es dir heute?")
        >>> session.dispose()
    """

    def __init__(
        self,
        config: SpellCheckConfig | None = None,
        store: DictionaryStore | None = None,
        resolver: LocaleResolver | None = None,
        guesser: LanguageGuesser | None = None,
        engine_factory: Callable[[], SpellingEngine] | None = None,
        scheduler: Scheduler | None = None,
        alternates: AlternatesMemo | None = None,
    ) -> None:
        self.config = config or SpellCheckConfig()
        self.store = store or DictionaryStore(self.config.dictionaries)
        self.resolver = resolver or LocaleResolver(self._default_table())
        self.guesser = guesser or LangdetectGuesser()
        self.engine_factory = engine_factory or (
            lambda: PySpellCheckerEngine(distance=self.config.oracle.edit_distance)
        )
        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler or ThreadingScheduler()
        self.alternates = alternates or AlternatesMemo(
            self.config.dictionaries.resolved_alternates_path()
        )

        self.spellchecker_changed = Signal("spellchecker_changed")
        self.spelling_error_occurred = Signal("spelling_error_occurred")
        self.spell_check_invoked = Signal("spell_check_invoked")

        self._state_lock = threading.RLock()
        self._switch_lock = threading.RLock()
        self._locale: str | None = None
        self._oracle: MisspellingOracle | None = None
        self._empty_oracle = self._make_oracle(None, None)
        self._suspended_locale: str | None = None
        self._pipeline: LanguageDetectionPipeline | None = None
        self._subscriptions: list[Callable[[], None]] = []
        self._disposed = False

    def _default_table(self) -> LocaleTable:
        table = get_locale_table()
        if table.env_var != self.config.locale_env_var:
            return LocaleTable(env_var=self.config.locale_env_var)
        return table

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def current_locale(self) -> str | None:
        return self._locale

    @property
    def current_oracle(self) -> MisspellingOracle | None:
        return self._oracle

    @property
    def has_dictionary(self) -> bool:
        return self._oracle is not None

    @property
    def pipeline(self) -> LanguageDetectionPipeline | None:
        return self._pipeline

    @property
    def disposed(self) -> bool:
        return self._disposed

    # -------------------------------------------------------------------------
    # Switching
    # -------------------------------------------------------------------------

    def switch_language(self, hint: str) -> SwitchResult:
        """
        Switch to the best available dictionary for a language or locale hint.

        Never raises for acquisition problems: if no candidate loads, the
        session is left without a dictionary and every word passes.

        Args:
            hint: Language ('de') or locale ('de_AT', 'de-AT') code.

        Returns:
            SwitchResult describing the locale now selected.

        Raises:
            InvalidLocaleFormat: If the hint is not a language or locale code.
        """
        hint = hint.strip()
        language = language_of(hint)
        exact = normalize_locale_code(hint) if is_locale_code(hint) else None

        with self._switch_lock:
            remembered = self.alternates.get(hint)
            plan = [remembered] if remembered else self._candidate_locales(language, exact)
            logger.debug("Requesting %s, candidates are %s", hint, plan)

            if plan and self._is_active(plan[0]):
                logger.debug("Already using %s for %s", plan[0], hint)
                return SwitchResult(hint, self._locale, True, changed=False)

            locale, engine = self._load_first(plan)
            if locale is None and remembered:
                logger.info(
                    "Remembered locale %s for %s failed, retrying full chain", remembered, hint
                )
                self.alternates.discard(hint)
                retry = [c for c in self._candidate_locales(language, exact) if c != remembered]
                if retry and self._is_active(retry[0]):
                    return SwitchResult(hint, self._locale, True, changed=False)
                locale, engine = self._load_first(retry)

            if self._disposed:
                logger.debug("Session disposed during switch to %s, discarding result", hint)
                return SwitchResult(hint, self._locale, self.has_dictionary, changed=False)

            if locale is None or engine is None:
                logger.warning("No dictionary available for %s, spell checking is inactive", hint)
                return self._install(exact or hint, None)

            self.alternates.set(hint, locale)
            if self._is_active(locale):
                return SwitchResult(hint, locale, True, changed=False)
            return self._install(locale, engine, requested=hint)

    def provide_hint_text(self, text: str) -> SwitchResult | None:
        """
        Detect the language of a sample text once and switch to it.

        Returns:
            The SwitchResult, or None if the sample was not reliable enough.
        """
        sample = text[-self.config.detection.sample_length :]
        try:
            language = self.guesser.detect_reliable(sample, self.config.detection.min_reliability)
        except DetectionUnreliable as e:
            logger.debug("Hint text not usable: %s", e)
            return None
        return self.switch_language(language)

    def _candidate_locales(self, language: str, exact: str | None) -> list[str]:
        candidates = [exact]
        try:
            candidates.append(self.resolver.likely_locale_for(language))
        except UnknownLanguage:
            pass
        candidates.append(fallback_locale_for(language))

        plan: list[str] = []
        for candidate in candidates:
            if candidate and candidate not in plan:
                plan.append(candidate)
        return plan

    def _load_first(self, plan: list[str]) -> tuple[str | None, SpellingEngine | None]:
        for locale in plan:
            try:
                blob = self.store.acquire(locale)
            except DictionaryError as e:
                logger.warning("Failed to load dictionary %s: %s", locale, e)
                continue

            engine = self.engine_factory()
            try:
                engine.set_dictionary(locale, blob)
            except DictionaryError as e:
                logger.warning("Dictionary %s is unreadable, evicting it: %s", locale, e)
                self._evict(locale)
                continue
            return locale, engine
        return None, None

    def _evict(self, locale: str) -> None:
        try:
            self.store.evict(locale)
        except DictionaryError as e:
            logger.warning("Could not evict %s: %s", locale, e)

    def _is_active(self, locale: str) -> bool:
        return self._oracle is not None and self._locale == locale

    def _install(
        self, locale: str, engine: SpellingEngine | None, requested: str | None = None
    ) -> SwitchResult:
        requested = requested or locale
        with self._state_lock:
            changed = self._locale != locale or (self._oracle is not None) != (engine is not None)
            self._locale = locale
            self._oracle = self._make_oracle(engine, locale) if engine is not None else None

        if changed:
            logger.info("Spellchecker is now %s (requested %s)", locale, requested)
            self.spellchecker_changed.emit(locale)
        return SwitchResult(requested, locale, engine is not None, changed)

    def _make_oracle(self, engine: SpellingEngine | None, locale: str | None) -> MisspellingOracle:
        return MisspellingOracle(
            engine,
            locale,
            config=self.config.oracle,
            clock=self.scheduler.now,
            on_misspelled=self.spelling_error_occurred.emit,
            on_invoked=self.spell_check_invoked.emit,
        )

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def attach_to_input(self, source: Signal | None = None) -> Signal:
        """
        Start automatic language detection from an input stream.

        Args:
            source: Signal the host emits the field's full text on after
                every change. A new one is created if not given.

        Returns:
            The input Signal to emit text changes on.
        """
        if source is None:
            source = Signal("input")
        if self._disposed:
            logger.debug("Session is disposed, not attaching to input")
            return source

        self._detach()
        pipeline = LanguageDetectionPipeline(
            self.guesser,
            self._switch_from_detection,
            self.scheduler,
            self.config.detection,
            is_attached=lambda: self._oracle is not None,
        )
        self._pipeline = pipeline
        self._subscriptions = [
            source.connect(pipeline.on_input),
            self.spelling_error_occurred.connect(pipeline.notify_misspelling),
            self.spell_check_invoked.connect(pipeline.notify_spell_check_invoked),
        ]
        return source

    def _switch_from_detection(self, language: str) -> None:
        if self._disposed:
            return
        # A language already selected without a dictionary stays selected
        # until detection reports a different one
        if self._oracle is None and self._locale is not None:
            if language_of(self._locale) == language_of(language):
                logger.debug("No dictionary for %s, not retrying", self._locale)
                return
        self.switch_language(language)

    def _detach(self) -> None:
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions = []
        if self._pipeline is not None:
            self._pipeline.stop()
            self._pipeline = None

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_misspelled(self, word: str) -> bool:
        return (self._oracle or self._empty_oracle).is_misspelled(word)

    def check_spelling(self, text: str) -> list[MisspelledSpan]:
        return (self._oracle or self._empty_oracle).check_spelling(text)

    def get_corrections_for_misspelling(self, word: str) -> list[str]:
        return (self._oracle or self._empty_oracle).get_corrections(word)

    def add_to_dictionary(self, word: str) -> bool:
        """Teach the active dictionary a word. Returns False if it cannot learn."""
        if self._oracle is None:
            return False
        return self._oracle.add(word)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def suspend(self) -> None:
        """Unload the active dictionary (e.g. when the window loses focus)."""
        with self._state_lock:
            if self._oracle is None:
                return
            self._suspended_locale = self._locale
            self._oracle = None
        logger.debug("Unloaded dictionary for %s", self._suspended_locale)

    def resume(self) -> SwitchResult | None:
        """Reload the dictionary unloaded by suspend()."""
        locale, self._suspended_locale = self._suspended_locale, None
        if locale is None or self._disposed:
            return None
        return self.switch_language(locale)

    def dispose(self) -> None:
        """Stop listening to input; in-flight switches are discarded when they finish."""
        if self._disposed:
            return
        self._disposed = True
        self._detach()
        if self._owns_scheduler:
            self.scheduler.shutdown()

    def __enter__(self) -> SpellCheckSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()
