from __future__ import annotations

import pytest
from bib_cleaner.normalize import (
    fold_case,
    fold_diacritics,
    is_blank,
    strip_digits,
    strip_punctuation,
)


def test_fold_case_uses_full_unicode_folding() -> None:
    assert fold_case("Lorem") == "lorem"
    assert fold_case("STRASSE") == "strasse"
    assert fold_case("Straße") == "strasse"
    assert fold_case("ΣΟΦΙΑ") == "σοφια"


def test_fold_diacritics() -> None:
    assert fold_diacritics("é") == "e"
    assert fold_diacritics("Pérez-Galdós") == "Perez-Galdos"
    assert fold_diacritics("Dvořák") == "Dvorak"
    assert fold_diacritics("plain") == "plain"


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("W.", "W"),
        ("dolor:", "dolor"),
        ("(1950-2018)", "1950-2018"),
        ("Jean-Paul", "Jean-Paul"),
        ("-abc-", "abc"),
        ("a--b", "a-b"),
        ("O'Brien", "OBrien"),
        ("«Éloge»", "Éloge"),
        ("$100%", "100"),
        ("...", ""),
        ("  spaced  ", "spaced"),
        ("", ""),
    ],
)
def test_strip_punctuation(token: str, expected: str) -> None:
    assert strip_punctuation(token) == expected


def test_strip_punctuation_normalizes_unicode_hyphen() -> None:
    assert strip_punctuation("Saint‐Exupéry") == "Saint-Exupéry"


def test_strip_punctuation_writes_year_range_dashes_as_hyphens() -> None:
    assert strip_punctuation("1950–2018.") == "1950-2018"
    assert strip_punctuation("1950—2018") == "1950-2018"
    assert strip_punctuation("Paris—London") == "ParisLondon"
    assert strip_punctuation("–") == ""


def test_strip_digits() -> None:
    assert strip_digits("1950-2018") == ""
    assert strip_digits("abc123") == "abc"
    assert strip_digits("word") == "word"


def test_is_blank() -> None:
    assert is_blank("")
    assert is_blank("   ")
    assert is_blank("\t")
    assert not is_blank("w")
