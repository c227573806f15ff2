from __future__ import annotations

import pytest
from bib_cleaner.resources import UnknownLanguageError
from bib_cleaner.stemming import SnowballStemmerAdapter, get_stemmer, stem_token, stem_tokens


class ExplodingStemmer:
    def stem(self, token: str) -> str:
        if token == "boom":
            raise RuntimeError("cannot stem")
        return token.upper()


class EmptyStemmer:
    def stem(self, token: str) -> str:
        return ""


def test_snowball_adapter_stems_english() -> None:
    stemmer = SnowballStemmerAdapter("english")

    assert stemmer.stem("running") == "run"
    assert stemmer.stem("libraries") == "librari"


def test_snowball_adapter_rejects_unknown_language() -> None:
    with pytest.raises(UnknownLanguageError, match="klingon"):
        SnowballStemmerAdapter("klingon")


def test_get_stemmer_is_cached() -> None:
    assert get_stemmer("french") is get_stemmer("french")


def test_failed_stem_keeps_token() -> None:
    stemmer = ExplodingStemmer()

    assert stem_token("boom", stemmer) == "boom"
    assert stem_tokens(["tick", "boom", "tock"], stemmer) == ["TICK", "boom", "TOCK"]


def test_empty_stem_keeps_token() -> None:
    assert stem_tokens(["a", "b"], EmptyStemmer()) == ["a", "b"]
