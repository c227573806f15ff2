"""Markup removal applied to tokens before they enter a cleaning pipeline."""

from __future__ import annotations

import html
import re
from typing import Iterable, List

TAG_PATTERN = re.compile(r"</?[A-Za-z][A-Za-z0-9:-]*(?:\s[^<>]*)?/?>")


def strip_markup(token: str) -> str:
    """Drop HTML/XML tags and decode character entities (``"&amp;"`` -> ``"&"``)."""

    if "<" in token:
        token = TAG_PATTERN.sub("", token)
    if "&" in token:
        token = html.unescape(token)
    return token


def strip_markup_tokens(tokens: Iterable[str]) -> List[str]:
    return [strip_markup(token) for token in tokens]
