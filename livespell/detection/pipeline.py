"""
Language detection pipeline: decides when to guess the typing language.

The pipeline watches raw input for one editing surface and moves through
IDLE -> SAMPLING -> DETECTING -> SWITCHING -> ATTACHED:

- Every input event records the latest full text and counts a word
  boundary when whitespace follows a non-whitespace character.
- Without a dictionary, bursts of input are debounced: detection runs
  once on the settled text after input goes quiet.
- With a dictionary, idle detection stops. Detection re-arms only after
  a misspelling, or when more than max_unchecked_words word boundaries
  pass without the host invoking the spell checker (the host's spell
  check integration stops firing when the user switches to a script the
  dictionary does not recognize).
- Settled text shorter than min_text_length is not worth guessing; the
  sample sent to the guesser is the last sample_length characters.
- Unreliable guesses are swallowed; the pipeline waits for the next
  trigger.

Triggers run one at a time through the scheduler. A new trigger never
cancels a switch already in flight; the session ignores redundant
switches to the locale it already has.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from livespell.config import DetectionConfig
from livespell.detection.guesser import LanguageGuesser
from livespell.detection.scheduler import ScheduledCall, Scheduler
from livespell.exceptions import DetectionUnreliable
from livespell.models import PipelineState

logger = logging.getLogger(__name__)


def ends_word(text: str) -> bool:
    """Whether the text ends in whitespace that follows a non-whitespace character."""
    return len(text) >= 2 and text[-1].isspace() and not text[-2].isspace()


class LanguageDetectionPipeline:
    """
    Reactive language detection for one editing surface.

    Attributes:
        guesser: LanguageGuesser used for detection attempts.
        scheduler: Scheduler that runs debounced triggers.
        config: DetectionConfig with debounce windows and thresholds.

    Example:
        >>> pipeline = LanguageDetectionPipeline(
        ...     LangdetectGuesser(), session.switch_language, VirtualScheduler()
        ... )
        >>> pipeline.on_input("Ceci est une phrase en français")
    """

    def __init__(
        self,
        guesser: LanguageGuesser,
        on_language: Callable[[str], Any],
        scheduler: Scheduler,
        config: DetectionConfig | None = None,
        is_attached: Callable[[], bool] | None = None,
    ) -> None:
        self.guesser = guesser
        self.scheduler = scheduler
        self.config = config or DetectionConfig()
        self._on_language = on_language
        self._is_attached = is_attached or (lambda: False)

        self._lock = threading.RLock()
        self._last_text = ""
        self._words_since_check = 0
        self._pending: ScheduledCall | None = None
        self._state = PipelineState.IDLE
        self._stopped = False

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def last_text(self) -> str:
        return self._last_text

    @property
    def words_since_check(self) -> int:
        return self._words_since_check

    # -------------------------------------------------------------------------
    # Inputs
    # -------------------------------------------------------------------------

    def on_input(self, text: str | None) -> None:
        """Handle one raw input change carrying the field's full text."""
        if self._stopped or not text:
            return

        with self._lock:
            self._last_text = text
            if ends_word(text):
                self._words_since_check += 1

            if not self._is_attached():
                self._state = PipelineState.SAMPLING
                self._schedule(self.config.idle_debounce)
            elif self._words_since_check > self.config.max_unchecked_words:
                logger.debug(
                    "%d words typed without a spell check, re-arming detection",
                    self._words_since_check,
                )
                self._words_since_check = 0
                self._schedule(self.config.attached_debounce)

    def notify_spell_check_invoked(self, *_: Any) -> None:
        """The host asked for a spell check; its integration is alive."""
        with self._lock:
            self._words_since_check = 0

    def notify_misspelling(self, *_: Any) -> None:
        """A misspelling was observed; re-confirm the language once input settles."""
        if self._stopped:
            return
        with self._lock:
            if self._is_attached() and self._last_text:
                self._schedule(self.config.attached_debounce)

    def stop(self) -> None:
        """Stop reacting to input and drop any pending trigger."""
        with self._lock:
            self._stopped = True
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None

    # -------------------------------------------------------------------------
    # Detection
    # -------------------------------------------------------------------------

    def run_detection(self, text: str) -> str | None:
        """
        Run one detection attempt on settled text and switch on success.

        Returns:
            The detected language, or None if the attempt was skipped or
            the guess was unreliable.
        """
        if self._stopped:
            return None

        if len(text) < self.config.min_text_length:
            logger.debug("Skipping detection, only %d characters", len(text))
            self._settle()
            return None

        sample = text[-self.config.sample_length :]
        self._state = PipelineState.DETECTING
        try:
            language = self.guesser.detect_reliable(sample, self.config.min_reliability)
        except DetectionUnreliable as e:
            logger.debug("Ignoring detection: %s", e)
            self._settle()
            return None

        if self._stopped:
            return None

        logger.debug("Detected %s, switching", language)
        self._state = PipelineState.SWITCHING
        try:
            self._on_language(language)
        finally:
            self._settle()
        return language

    def _schedule(self, delay: float) -> None:
        if self._pending is not None:
            self._pending.cancel()
        self._pending = self.scheduler.call_later(delay, self._on_settled)

    def _on_settled(self) -> None:
        with self._lock:
            self._pending = None
            if self._stopped:
                return
            text = self._last_text
        self.run_detection(text)

    def _settle(self) -> None:
        self._state = PipelineState.ATTACHED if self._is_attached() else PipelineState.IDLE
