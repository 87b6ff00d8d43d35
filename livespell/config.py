"""
Configuration for livespell sessions.

All options have sensible defaults. Create a config only if you need
to customize behavior, or load one from YAML with load_config().
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from livespell.exceptions import ConfigurationError

# pyspellchecker publishes its word-frequency dictionaries per language.
DEFAULT_DICTIONARY_URL = (
    "https://raw.githubusercontent.com/barrust/pyspellchecker/master/"
    "spellchecker/resources/{language}.json.gz"
)

# Anything smaller than this is a broken download, not an empty dictionary
MIN_VALID_DICTIONARY_SIZE = 8 * 1024


def default_cache_dir() -> Path:
    """Return the per-user directory where dictionaries are cached."""
    if sys.platform == "win32" and os.environ.get("LOCALAPPDATA"):
        base = Path(os.environ["LOCALAPPDATA"])
    elif os.environ.get("XDG_CACHE_HOME"):
        base = Path(os.environ["XDG_CACHE_HOME"])
    else:
        base = Path.home() / ".cache"
    return base / "livespell" / "dictionaries"


@dataclass
class DictionaryConfig:
    """
    Configuration for dictionary acquisition and caching.

    Example:
        >>> config = DictionaryConfig(cache_dir=Path("/tmp/dicts"))
        >>> store = DictionaryStore(config)
    """

    cache_dir: Path | None = None  # None = default_cache_dir()
    url_template: str = DEFAULT_DICTIONARY_URL
    file_suffix: str = ".json.gz"
    min_valid_size: int = MIN_VALID_DICTIONARY_SIZE
    download_timeout: float | None = None  # None = wait indefinitely
    alternates_path: Path | None = None  # None = <cache_dir>/alternates.json

    def __post_init__(self):
        """Validate configuration."""
        if self.cache_dir is not None:
            self.cache_dir = Path(self.cache_dir)
        if self.alternates_path is not None:
            self.alternates_path = Path(self.alternates_path)
        if self.min_valid_size < 1:
            raise ConfigurationError(f"min_valid_size must be >= 1, got {self.min_valid_size}")
        if self.download_timeout is not None and self.download_timeout <= 0:
            raise ConfigurationError(
                f"download_timeout must be positive or None, got {self.download_timeout}"
            )
        if "{" not in self.url_template:
            raise ConfigurationError(
                f"url_template must contain a {{locale}}, {{language}} or {{region}} field, "
                f"got {self.url_template!r}"
            )

    def resolved_cache_dir(self) -> Path:
        return self.cache_dir or default_cache_dir()

    def resolved_alternates_path(self) -> Path:
        return self.alternates_path or self.resolved_cache_dir() / "alternates.json"


@dataclass
class DetectionConfig:
    """
    Configuration for the language detection pipeline.

    The idle debounce applies while no dictionary is loaded. Once a
    dictionary is active, detection only re-arms after a misspelling or
    after more than max_unchecked_words word boundaries pass without the
    host invoking the spell checker, and then waits attached_debounce.
    """

    idle_debounce: float = 0.25  # seconds
    attached_debounce: float = 0.75  # seconds
    min_text_length: int = 8  # characters
    sample_length: int = 256  # characters submitted to the guesser
    min_reliability: int = 85  # percent
    max_unchecked_words: int = 2

    def __post_init__(self):
        """Validate configuration."""
        if self.idle_debounce < 0 or self.attached_debounce < 0:
            raise ConfigurationError(
                f"debounce windows must be >= 0, got idle={self.idle_debounce} "
                f"attached={self.attached_debounce}"
            )
        if self.min_reliability < 0 or self.min_reliability > 100:
            raise ConfigurationError(
                f"min_reliability must be between 0 and 100, got {self.min_reliability}"
            )
        if self.sample_length < self.min_text_length:
            raise ConfigurationError(
                f"sample_length ({self.sample_length}) must be >= "
                f"min_text_length ({self.min_text_length})"
            )
        if self.max_unchecked_words < 0:
            raise ConfigurationError(
                f"max_unchecked_words must be >= 0, got {self.max_unchecked_words}"
            )


@dataclass
class OracleConfig:
    """Configuration for the misspelling oracle and its memo cache."""

    memo_size: int = 512
    memo_ttl: float = 4.0  # seconds
    edit_distance: int = 2

    def __post_init__(self):
        """Validate configuration."""
        if self.memo_size < 1:
            raise ConfigurationError(f"memo_size must be >= 1, got {self.memo_size}")
        if self.memo_ttl <= 0:
            raise ConfigurationError(f"memo_ttl must be positive, got {self.memo_ttl}")
        if self.edit_distance not in (1, 2):
            raise ConfigurationError(f"edit_distance must be 1 or 2, got {self.edit_distance}")


@dataclass
class SpellCheckConfig:
    """
    Top-level configuration for a SpellCheckSession.

    Example:
        >>> config = SpellCheckConfig(
        ...     detection=DetectionConfig(idle_debounce=0.5),
        ... )
        >>> session = SpellCheckSession(config=config)
    """

    dictionaries: DictionaryConfig = field(default_factory=DictionaryConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    oracle: OracleConfig = field(default_factory=OracleConfig)

    # Environment variable holding the user's explicit regional preference
    locale_env_var: str = "LANG"


_SECTIONS = {
    "dictionaries": DictionaryConfig,
    "detection": DetectionConfig,
    "oracle": OracleConfig,
}


def _build_section(name: str, raw: Any) -> Any:
    section_cls = _SECTIONS[name]
    if raw is None:
        return section_cls()
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Section {name!r} must be a mapping, got {type(raw).__name__}")
    known = {f.name for f in fields(section_cls)}
    unknown = set(raw) - known
    if unknown:
        raise ConfigurationError(f"Unknown keys in {name!r}: {', '.join(sorted(unknown))}")
    return section_cls(**raw)


def load_config(path: str | Path) -> SpellCheckConfig:
    """
    Load a SpellCheckConfig from a YAML file.

    The file holds an optional mapping per section:

        dictionaries:
          cache_dir: ~/.cache/myapp/dictionaries
        detection:
          idle_debounce: 0.5
        oracle:
          memo_ttl: 2.0

    Args:
        path: Path to the YAML file.

    Returns:
        SpellCheckConfig with defaults for anything not given.

    Raises:
        ConfigurationError: If the document is malformed or has unknown keys.
        OSError: If the file cannot be read.
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return SpellCheckConfig()
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping, got {type(data).__name__}")

    unknown = set(data) - set(_SECTIONS) - {"locale_env_var"}
    if unknown:
        raise ConfigurationError(f"Unknown configuration sections: {', '.join(sorted(unknown))}")

    dictionaries = data.get("dictionaries")
    if isinstance(dictionaries, dict) and dictionaries.get("cache_dir"):
        dictionaries = {**dictionaries, "cache_dir": Path(dictionaries["cache_dir"]).expanduser()}

    return SpellCheckConfig(
        dictionaries=_build_section("dictionaries", dictionaries),
        detection=_build_section("detection", data.get("detection")),
        oracle=_build_section("oracle", data.get("oracle")),
        locale_env_var=data.get("locale_env_var", "LANG"),
    )
