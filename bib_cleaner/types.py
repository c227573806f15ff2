from __future__ import annotations

from typing import Callable, List, TypedDict

TokenSequence = List[str]
StageFunction = Callable[[TokenSequence], TokenSequence]


class CleanedRecord(TypedDict):
    """One input line and the tokens its cleaning produced."""

    input: str
    tokens: list[str]
