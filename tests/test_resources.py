from __future__ import annotations

from pathlib import Path
from typing import Iterator

import bib_cleaner.resources as resources
import pytest
from bib_cleaner.resources import (
    ResourceLoadError,
    StopwordCatalog,
    UnknownLanguageError,
    load_stop_words,
    load_stopword_catalog,
)
from pytest import MonkeyPatch


class FakeStopwords:
    def __init__(self, lists: dict[str, list[str]]) -> None:
        self.lists = lists
        self.loaded: list[str] = []

    def fileids(self) -> list[str]:
        return list(self.lists)

    def words(self, language: str) -> list[str]:
        self.loaded.append(language)
        return self.lists[language]


class MissingCorpus:
    def fileids(self) -> list[str]:
        raise LookupError("Resource stopwords not found.")


@pytest.fixture(autouse=True)
def clear_caches() -> Iterator[None]:
    resources.load_stopword_catalog.cache_clear()
    resources.default_stop_words.cache_clear()
    yield
    resources.load_stopword_catalog.cache_clear()
    resources.default_stop_words.cache_clear()


@pytest.fixture
def fake_stopwords(monkeypatch: MonkeyPatch) -> FakeStopwords:
    fake = FakeStopwords(
        {
            "english": ["The", "of", "and"],
            "french": ["le", "à", "Été"],
            "latin": ["sit"],
        }
    )
    monkeypatch.setattr(resources, "stopwords", fake)
    return fake


def test_catalog_normalizes_words() -> None:
    catalog = StopwordCatalog.from_mapping({"French": ["Le", "À", " "]})

    assert catalog.languages == ("french",)
    assert catalog.words("french") == frozenset({"le", "a"})


def test_catalog_is_read_only() -> None:
    catalog = StopwordCatalog.from_mapping({"english": ["the"]})

    with pytest.raises(TypeError):
        catalog.sets["german"] = frozenset()  # type: ignore[index]


def test_catalog_merged() -> None:
    catalog = StopwordCatalog.from_mapping({"english": ["the"], "french": ["le"], "latin": ["sit"]})

    assert catalog.merged(["english", "latin"]) == frozenset({"the", "sit"})
    assert catalog.merged() == frozenset({"the", "le", "sit"})


def test_catalog_unknown_language() -> None:
    catalog = StopwordCatalog.from_mapping({"english": ["the"]})

    with pytest.raises(UnknownLanguageError, match="klingon"):
        catalog.words("klingon")


def test_load_stopword_catalog_loads_once(fake_stopwords: FakeStopwords) -> None:
    first = load_stopword_catalog(("english", "french"))
    second = load_stopword_catalog(("english", "french"))

    assert first is second
    assert fake_stopwords.loaded == ["english", "french"]
    assert first.words("french") == frozenset({"le", "a", "ete"})


def test_load_stopword_catalog_fails_fast_on_unknown_language(fake_stopwords: FakeStopwords) -> None:
    with pytest.raises(UnknownLanguageError) as excinfo:
        load_stopword_catalog(("english", "klingon"))

    assert excinfo.value.language == "klingon"
    assert isinstance(excinfo.value, ValueError)


def test_missing_corpus_raises_resource_error(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr(resources, "stopwords", MissingCorpus())

    with pytest.raises(ResourceLoadError, match="nltk.downloader"):
        load_stopword_catalog(("english",))


def test_load_stop_words_combines_sources(fake_stopwords: FakeStopwords, tmp_path: Path) -> None:
    stop_words_path = tmp_path / "stop.txt"
    stop_words_path.write_text("Ipsum\n\nDolor\n", encoding="utf-8")

    compiled = load_stop_words(
        ("latin",),
        stop_words_path=stop_words_path,
        extra_stopwords=["AMET", " "],
    )

    assert compiled == frozenset({"sit", "ipsum", "dolor", "amet"})


def test_load_stop_words_without_defaults(fake_stopwords: FakeStopwords) -> None:
    compiled = load_stop_words(("english",), extra_stopwords=["sit"], include_default=False)

    assert compiled == frozenset({"sit"})
    assert fake_stopwords.loaded == []
