from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Protocol, Sequence

from nltk.stem.snowball import SnowballStemmer

from bib_cleaner.resources import UnknownLanguageError

LOGGER = logging.getLogger(__name__)


class Stemmer(Protocol):
    """Anything able to reduce a normalized token to its stem."""

    def stem(self, token: str) -> str:
        ...


class SnowballStemmerAdapter:
    """Snowball stemmer from NLTK behind the :class:`Stemmer` protocol."""

    def __init__(self, language: str = "english") -> None:
        name = language.lower()
        if name not in SnowballStemmer.languages:
            raise UnknownLanguageError(language, SnowballStemmer.languages)
        self.language = name
        self._stemmer = SnowballStemmer(name)

    def stem(self, token: str) -> str:
        return str(self._stemmer.stem(token))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.language!r})"


@lru_cache(maxsize=None)
def get_stemmer(language: str = "english") -> SnowballStemmerAdapter:
    LOGGER.debug("Creating Snowball stemmer for %s", language)
    return SnowballStemmerAdapter(language)


def stem_token(token: str, stemmer: Stemmer) -> str:
    """Stem ``token``, falling back to the token itself when stemming fails."""

    try:
        stemmed = stemmer.stem(token)
    except Exception:  # noqa: BLE001
        LOGGER.debug("Stemmer %r failed on %r, keeping token", stemmer, token, exc_info=True)
        return token
    return stemmed or token


def stem_tokens(tokens: Sequence[str], stemmer: Stemmer) -> List[str]:
    return [stem_token(token, stemmer) for token in tokens]
