"""
Language detection: guessers, schedulers and the reactive pipeline.

Example:
    >>> from livespell.detection import LangdetectGuesser
    >>> LangdetectGuesser().detect_reliable("Questo è un testo scritto in italiano.")
    'it'
"""

from livespell.detection.guesser import (
    LangdetectGuesser,
    LanguageGuesser,
    supported_languages,
)
from livespell.detection.pipeline import LanguageDetectionPipeline, ends_word
from livespell.detection.scheduler import (
    ScheduledCall,
    Scheduler,
    ThreadingScheduler,
    VirtualScheduler,
)

__all__ = [
    # Pipeline
    "LanguageDetectionPipeline",
    "ends_word",
    # Guessers
    "LanguageGuesser",
    "LangdetectGuesser",
    "supported_languages",
    # Schedulers
    "Scheduler",
    "ScheduledCall",
    "ThreadingScheduler",
    "VirtualScheduler",
]
