#!/usr/bin/env python3
"""
Basic livespell Usage Example

This example demonstrates the core workflow:
1. Create a session and pick a language explicitly
2. Ask about words and text
3. Let the session follow the user's typing language
4. Warm the dictionary cache ahead of time
5. Suspend and resume with window focus
"""

import logging
import time

from livespell import (
    DetectionConfig,
    DictionaryStore,
    SpellCheckConfig,
    SpellCheckSession,
)


def main():
    logging.basicConfig(level=logging.INFO)

    # ─────────────────────────────────────────────────────────────────────────
    # 1. Explicit Language
    # ─────────────────────────────────────────────────────────────────────────

    session = SpellCheckSession()
    session.spellchecker_changed.connect(lambda locale: print(f"Now checking {locale}"))

    # Accepts a language ('en') or a locale in any spelling ('en_us', 'en-US')
    result = session.switch_language("en")
    print(f"Requested {result.requested}, got {result.locale}")
    if not result.dictionary_loaded:
        print("  No dictionary available; every word passes until one loads")

    # ─────────────────────────────────────────────────────────────────────────
    # 2. Queries
    # ─────────────────────────────────────────────────────────────────────────

    for word in ["receive", "recieve", "don't", "Hello"]:
        print(f"  {word!r} misspelled: {session.is_misspelled(word)}")

    print(f"  Corrections for 'recieve': {session.get_corrections_for_misspelling('recieve')}")

    text = "Thsi sentence has a typo. And anothr one."
    for span in session.check_spelling(text):
        print(f"  {span.start}-{span.end}: {span.word(text)}")

    session.add_to_dictionary("livespell")

    # ─────────────────────────────────────────────────────────────────────────
    # 3. Follow the Typing Language
    # ─────────────────────────────────────────────────────────────────────────

    # The host emits the field's full text after every change
    source = session.attach_to_input()
    source.emit("Das ist ein ganz normaler deutscher Satz über einen Eimer.")

    # Detection is debounced and runs on a worker thread
    time.sleep(2)
    print(f"After German typing: {session.current_locale}")

    session.dispose()


def custom_configuration_example():
    """Tune detection and share a dictionary cache."""
    config = SpellCheckConfig(
        detection=DetectionConfig(
            idle_debounce=0.5,  # Wait longer before the first guess
            min_reliability=90,  # Only switch on very confident guesses
        ),
    )

    # Download dictionaries up front, e.g. during installation
    store = DictionaryStore(config.dictionaries)
    ready = store.prefetch(["en-US", "de-DE", "fr-FR"])
    print(f"Cached: {sorted(ready)}")

    with SpellCheckSession(config=config, store=store) as session:
        session.provide_hint_text("Ceci est un texte écrit en français, assez long pour être fiable.")
        print(f"Hint text selected {session.current_locale}")


def focus_example(session: SpellCheckSession):
    """Free dictionary memory while the window is in the background."""
    session.suspend()  # on blur
    session.resume()  # on focus


if __name__ == "__main__":
    # Note: The first run downloads dictionaries into the user cache directory.
    print("livespell Usage Examples")
    print("=" * 50)
    main()
