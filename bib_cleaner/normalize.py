"""Single-token normalization primitives.

Every function here is total: any string goes in, a string (possibly empty)
comes out. Tokens reduced to nothing are filtered later with :func:`is_blank`.
"""

from __future__ import annotations

import unicodedata

HYPHENS = frozenset("-‐‑")
# Figure, en and em dashes join numbers, as in 1950–2018.
RANGE_DASHES = frozenset("‒–—")


def fold_case(token: str) -> str:
    """Full Unicode case folding (``"Straße"`` -> ``"strasse"``)."""

    return token.casefold()


def fold_diacritics(token: str) -> str:
    """Replace accented letters with their base letter (``"é"`` -> ``"e"``)."""

    if token.isascii():
        return token
    decomposed = unicodedata.normalize("NFD", token)
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return unicodedata.normalize("NFC", stripped)


def _is_punctuation_or_symbol(char: str) -> bool:
    return unicodedata.category(char)[0] in ("P", "S")


def strip_punctuation(token: str) -> str:
    """Remove punctuation and symbol characters, keeping internal hyphens.

    A hyphen survives only when it joins two alphanumeric characters, so
    ``"Jean-Paul"`` is kept as is while ``"-abc-"`` becomes ``"abc"``. A range
    dash between two digits is written as a hyphen.
    """

    token = token.strip()
    if token.isalnum():
        return token

    kept: list[str] = []
    last = len(token) - 1
    for index, char in enumerate(token):
        if char in HYPHENS:
            if kept and kept[-1].isalnum() and index < last and token[index + 1].isalnum():
                kept.append("-")
            continue
        if char in RANGE_DASHES:
            if kept and kept[-1].isdigit() and index < last and token[index + 1].isdigit():
                kept.append("-")
            continue
        if _is_punctuation_or_symbol(char):
            continue
        kept.append(char)
    return "".join(kept).strip()


def strip_digits(token: str) -> str:
    """Remove decimal digits, then any hyphen left dangling at either end."""

    if not any(char.isdigit() for char in token):
        return token
    return "".join(char for char in token if not char.isdigit()).strip("-")


def is_blank(token: str) -> bool:
    return not token or token.isspace()
