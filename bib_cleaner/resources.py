from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from nltk.corpus import stopwords

from bib_cleaner.normalize import fold_case, fold_diacritics

LOGGER = logging.getLogger(__name__)

# Bibliographic records routinely mix these languages, so the merged set is the default.
DEFAULT_LANGUAGES: tuple[str, ...] = (
    "english",
    "french",
    "german",
    "spanish",
    "italian",
    "portuguese",
)


class UnknownLanguageError(ValueError):
    """Raised when no lexical resource exists for a requested language."""

    def __init__(self, language: str, available: Iterable[str] = ()) -> None:
        choices = ", ".join(sorted(available))
        message = f"No resource available for language '{language}'"
        if choices:
            message = f"{message}. Expected one of: {choices}"
        super().__init__(message)
        self.language = language


class ResourceLoadError(RuntimeError):
    """Raised when the NLTK stopword corpus cannot be read."""


def normalize_word(word: str) -> str:
    """Normalize a stopword (or a token being looked up) to its comparison form."""

    return fold_diacritics(fold_case(word.strip()))


@dataclass(frozen=True)
class StopwordCatalog:
    """Read-only mapping from language name to its normalized stopword set."""

    sets: Mapping[str, frozenset[str]]

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> StopwordCatalog:
        normalized = {
            language.lower(): frozenset(normalize_word(word) for word in words if word.strip())
            for language, words in mapping.items()
        }
        return cls(MappingProxyType(normalized))

    @property
    def languages(self) -> tuple[str, ...]:
        return tuple(self.sets)

    def words(self, language: str) -> frozenset[str]:
        try:
            return self.sets[language.lower()]
        except KeyError:
            raise UnknownLanguageError(language, self.sets) from None

    def merged(self, languages: Sequence[str] | None = None) -> frozenset[str]:
        """Union of the stopword sets of ``languages`` (all languages when omitted)."""

        selected = self.languages if languages is None else languages
        merged: set[str] = set()
        for language in selected:
            merged.update(self.words(language))
        return frozenset(merged)


def _available_languages() -> list[str]:
    try:
        return list(stopwords.fileids())
    except LookupError as exc:
        raise ResourceLoadError(
            "NLTK stopwords corpus is not installed. Run 'python -m nltk.downloader stopwords'."
        ) from exc


@lru_cache(maxsize=None)
def load_stopword_catalog(languages: tuple[str, ...] = DEFAULT_LANGUAGES) -> StopwordCatalog:
    """Load the NLTK stopword lists for ``languages`` once per process."""

    available = _available_languages()
    mapping: dict[str, list[str]] = {}
    for language in languages:
        name = language.lower()
        if name not in available:
            raise UnknownLanguageError(language, available)
        mapping[name] = stopwords.words(name)
        LOGGER.debug("Loaded %d stop words for %s", len(mapping[name]), name)

    LOGGER.info("Loaded stop words for %s", ", ".join(mapping) or "no languages")
    return StopwordCatalog.from_mapping(mapping)


@lru_cache(maxsize=None)
def default_stop_words(languages: tuple[str, ...] = DEFAULT_LANGUAGES) -> frozenset[str]:
    """Merged NLTK stop words for ``languages``, computed once per language tuple."""

    return load_stopword_catalog(languages).merged()


def load_stop_words(
    languages: Sequence[str] = DEFAULT_LANGUAGES,
    *,
    stop_words_path: Path | None = None,
    extra_stopwords: Sequence[str] | None = None,
    include_default: bool = True,
) -> frozenset[str]:
    """Compose a stop word set from NLTK lists, an optional file and extras."""

    compiled: set[str] = set()

    if include_default:
        compiled.update(default_stop_words(tuple(languages)))

    if stop_words_path:
        LOGGER.debug("Loading stop words from %s", stop_words_path)
        with stop_words_path.open("r", encoding="utf-8") as infile:
            compiled.update(normalize_word(line) for line in infile if line.strip())

    if extra_stopwords:
        compiled.update(normalize_word(word) for word in extra_stopwords if word.strip())

    return frozenset(compiled)
