"""Recognizers for structural artifacts in token sequences.

Matchers only return spans; :func:`remove_spans` does the deletion so the
same spans can be inspected in tests or logged by callers.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

Span = Tuple[int, int]

DELIMITERS = {"(": ")", "[": "]"}
STRONG_PUNCTUATION = (".", ":", "?", "!")
# Catalogue records often end a heading with one of these after the closing delimiter.
TRAILING_PUNCTUATION = ".,;:"

_DASH = "-‐‑‒–—"
_YEAR = r"\d{3,4}\??"
_HALF_OPEN = rf"{_YEAR}\s*[{_DASH}]|[{_DASH}]\s*{_YEAR}"
# 1950-2018 with any dash. Both years are required outside delimiters.
YEAR_RANGE_PATTERN = re.compile(rf"{_YEAR}\s*[{_DASH}]\s*{_YEAR}")
# Inside delimiters open ranges and single years are accepted too: (1950-), (-2018), [1885?].
DELIMITED_DATE_PATTERN = re.compile(
    rf"(?:(?:ca|c|b|d|fl|n|m)\.?\s*)?(?:{YEAR_RANGE_PATTERN.pattern}|{_HALF_OPEN}|{_YEAR})\.?",
    re.IGNORECASE,
)


def is_year_range(text: str) -> bool:
    """True for a bare dash-separated year pair such as ``1950-2018``."""

    return YEAR_RANGE_PATTERN.fullmatch(text.strip()) is not None


def _is_delimited_date(inner: str) -> bool:
    return DELIMITED_DATE_PATTERN.fullmatch(inner.strip()) is not None


def _closing_for(token: str) -> Optional[str]:
    return DELIMITERS.get(token[:1])


def _trim(token: str) -> str:
    return token.strip().rstrip(TRAILING_PUNCTUATION)


def find_delimited_date_spans(tokens: Sequence[str]) -> List[Span]:
    """Locate delimited dates such as ``(1950-2018)`` or ``(``, ``1950-``, ``)``.

    Punctuation trailing the closing delimiter (``"(1950-2018)."``) is part of
    the match.
    """

    spans: List[Span] = []
    index = 0
    while index < len(tokens):
        closing = _closing_for(tokens[index].strip())
        if closing is not None:
            end = _find_closing(tokens, index, closing)
            if end is not None:
                inner = _trim(" ".join(tokens[index : end + 1]))[1:-1]
                if _is_delimited_date(inner):
                    spans.append((index, end + 1))
                    index = end + 1
                    continue
        index += 1
    return spans


def find_life_date_spans(tokens: Sequence[str]) -> List[Span]:
    """Locate life-date artifacts in an author token list.

    Delimited dates (see :func:`find_delimited_date_spans`) and bare year
    pairs such as ``1950-2018`` or ``1950-2018.`` match. A lone number like
    ``1984`` or a half-open ``1950-`` outside delimiters does not.
    """

    spans = find_delimited_date_spans(tokens)
    covered = {index for start, end in spans for index in range(start, end)}
    for index, token in enumerate(tokens):
        if index not in covered and is_year_range(_trim(token)):
            spans.append((index, index + 1))
    return sorted(spans)


def _find_closing(tokens: Sequence[str], start: int, closing: str) -> Optional[int]:
    for offset in range(start, len(tokens)):
        if _trim(tokens[offset]).endswith(closing):
            return offset
    return None


def find_delimited_spans(tokens: Sequence[str], opening: str, closing: str) -> List[Span]:
    """Spans running from a token starting with ``opening`` to the next one ending with ``closing``.

    An opening delimiter without a closing one matches nothing, and neither
    does anything after it.
    """

    spans: List[Span] = []
    index = 0
    while index < len(tokens):
        if tokens[index].strip().startswith(opening):
            end = _find_closing(tokens, index, closing)
            if end is None:
                break
            spans.append((index, end + 1))
            index = end + 1
            continue
        index += 1
    return spans


def find_annotation_spans(tokens: Sequence[str]) -> List[Span]:
    """Parenthesized and bracketed runs, merged and sorted."""

    spans: List[Span] = []
    for opening, closing in DELIMITERS.items():
        spans.extend(find_delimited_spans(tokens, opening, closing))
    return _drop_overlaps(sorted(spans))


def _drop_overlaps(spans: List[Span]) -> List[Span]:
    kept: List[Span] = []
    for start, end in spans:
        if kept and start < kept[-1][1]:
            continue
        kept.append((start, end))
    return kept


def find_subtitle_start(tokens: Sequence[str]) -> Optional[int]:
    """Index of the first token ending with strong punctuation, if any."""

    for index, token in enumerate(tokens):
        if token.rstrip().endswith(STRONG_PUNCTUATION):
            return index
    return None


def remove_spans(tokens: Sequence[str], spans: Sequence[Span]) -> List[str]:
    """Return a copy of ``tokens`` without the given spans."""

    remaining = list(tokens)
    for start, end in sorted(spans, reverse=True):
        del remaining[start:end]
    return remaining
