from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import AbstractSet, Callable, Iterable, List, Mapping, Sequence, Tuple

from bib_cleaner import normalize
from bib_cleaner.markup import strip_markup_tokens
from bib_cleaner.patterns import (
    find_annotation_spans,
    find_delimited_date_spans,
    find_life_date_spans,
    find_subtitle_start,
    remove_spans,
)
from bib_cleaner.resources import DEFAULT_LANGUAGES, load_stop_words, normalize_word
from bib_cleaner.stemming import Stemmer, get_stemmer, stem_tokens
from bib_cleaner.types import StageFunction, TokenSequence

LOGGER = logging.getLogger(__name__)


class Variant(str, Enum):
    TITLE = "title"
    AUTHOR = "author"
    TEXT = "text"

    @classmethod
    def parse(cls, value: Variant | str) -> Variant:
        if isinstance(value, Variant):
            return value
        try:
            return cls(value.lower())
        except ValueError:
            expected = ", ".join(repr(variant.value) for variant in cls)
            raise ValueError(f"Unknown variant '{value}'. Expected one of {expected}.") from None


class Stage(str, Enum):
    SUBTITLE_STRIP = "subtitle_strip"
    ANNOTATION_STRIP = "annotation_strip"
    FOLD_CASE = "fold_case"
    DELIMITED_DATE_STRIP = "delimited_date_strip"
    LIFE_DATE_STRIP = "life_date_strip"
    FOLD_DIACRITICS = "fold_diacritics"
    STRIP_PUNCTUATION = "strip_punctuation"
    STRIP_DIGITS = "strip_digits"
    DROP_BLANK = "drop_blank"
    DROP_SHORT = "drop_short"
    STOPWORD_FILTER = "stopword_filter"
    STEM = "stem"


# Full stage order per variant. Optional stages are dropped by ``stage_order``
# according to the options; the relative order never changes.
VARIANT_STAGES: Mapping[Variant, Tuple[Stage, ...]] = MappingProxyType(
    {
        Variant.TITLE: (
            Stage.SUBTITLE_STRIP,
            Stage.ANNOTATION_STRIP,
            Stage.FOLD_CASE,
            Stage.FOLD_DIACRITICS,
            Stage.STRIP_PUNCTUATION,
            Stage.STRIP_DIGITS,
            Stage.DROP_BLANK,
            Stage.DROP_SHORT,
            Stage.STOPWORD_FILTER,
            Stage.STEM,
        ),
        # Delimited dates such as (1950-) are only recognizable before punctuation
        # stripping; bare year pairs are removed from the stripped tokens.
        Variant.AUTHOR: (
            Stage.ANNOTATION_STRIP,
            Stage.FOLD_CASE,
            Stage.DELIMITED_DATE_STRIP,
            Stage.FOLD_DIACRITICS,
            Stage.STRIP_PUNCTUATION,
            Stage.STRIP_DIGITS,
            Stage.DROP_BLANK,
            Stage.LIFE_DATE_STRIP,
        ),
        Variant.TEXT: (
            Stage.ANNOTATION_STRIP,
            Stage.FOLD_CASE,
            Stage.FOLD_DIACRITICS,
            Stage.STRIP_PUNCTUATION,
            Stage.STRIP_DIGITS,
            Stage.DROP_BLANK,
            Stage.DROP_SHORT,
            Stage.STOPWORD_FILTER,
            Stage.STEM,
        ),
    }
)

DIACRITIC_FOLDING_DEFAULTS: Mapping[Variant, bool] = MappingProxyType(
    {Variant.TITLE: False, Variant.AUTHOR: False, Variant.TEXT: True}
)


@dataclass(frozen=True)
class CleaningOptions:
    """Configuration for token cleaning."""

    languages: Tuple[str, ...] = DEFAULT_LANGUAGES
    include_default_stopwords: bool = True
    stop_words_path: Path | None = None
    extra_stopwords: Tuple[str, ...] = ()
    fold_diacritics: bool | None = None  # None: variant default
    strip_digits: bool = False
    min_token_length: int = 0
    drop_subtitle: bool = False
    strip_annotations: bool = False
    stem: bool = False
    stem_language: str = "english"
    html: bool = False

    def __post_init__(self) -> None:
        if self.min_token_length < 0:
            raise ValueError(f"min_token_length must be >= 0, got {self.min_token_length}")


def _per_token(function: Callable[[str], str]) -> StageFunction:
    def stage(tokens: TokenSequence) -> TokenSequence:
        return [function(token) for token in tokens]

    return stage


def drop_blank(tokens: TokenSequence) -> TokenSequence:
    return [token for token in tokens if not normalize.is_blank(token)]


def strip_delimited_dates(tokens: TokenSequence) -> TokenSequence:
    return remove_spans(tokens, find_delimited_date_spans(tokens))


def strip_life_dates(tokens: TokenSequence) -> TokenSequence:
    return remove_spans(tokens, find_life_date_spans(tokens))


def strip_annotations(tokens: TokenSequence) -> TokenSequence:
    return remove_spans(tokens, find_annotation_spans(tokens))


def strip_subtitle(tokens: TokenSequence) -> TokenSequence:
    """Keep the main title: everything up to the first token ending with ``.:?!``."""

    end = find_subtitle_start(tokens)
    if end is None:
        return list(tokens)
    return list(tokens[: end + 1])


def drop_short_tokens(min_length: int) -> StageFunction:
    def stage(tokens: TokenSequence) -> TokenSequence:
        return [token for token in tokens if len(token) >= min_length]

    return stage


def filter_stop_words(stop_words: AbstractSet[str]) -> StageFunction:
    """Build a stage removing tokens whose normalized form is a stop word."""

    def stage(tokens: TokenSequence) -> TokenSequence:
        return [token for token in tokens if normalize_word(token) not in stop_words]

    return stage


def stem_stage(stemmer: Stemmer) -> StageFunction:
    def stage(tokens: TokenSequence) -> TokenSequence:
        return stem_tokens(tokens, stemmer)

    return stage


STATIC_STAGES: Mapping[Stage, StageFunction] = MappingProxyType(
    {
        Stage.SUBTITLE_STRIP: strip_subtitle,
        Stage.ANNOTATION_STRIP: strip_annotations,
        Stage.FOLD_CASE: _per_token(normalize.fold_case),
        Stage.DELIMITED_DATE_STRIP: strip_delimited_dates,
        Stage.LIFE_DATE_STRIP: strip_life_dates,
        Stage.FOLD_DIACRITICS: _per_token(normalize.fold_diacritics),
        Stage.STRIP_PUNCTUATION: _per_token(normalize.strip_punctuation),
        Stage.STRIP_DIGITS: _per_token(normalize.strip_digits),
        Stage.DROP_BLANK: drop_blank,
    }
)


def _stage_enabled(stage: Stage, variant: Variant, options: CleaningOptions) -> bool:
    if stage is Stage.SUBTITLE_STRIP:
        return options.drop_subtitle
    if stage is Stage.ANNOTATION_STRIP:
        return options.strip_annotations
    if stage is Stage.FOLD_DIACRITICS:
        if options.fold_diacritics is None:
            return DIACRITIC_FOLDING_DEFAULTS[variant]
        return options.fold_diacritics
    if stage is Stage.STRIP_DIGITS:
        return options.strip_digits
    if stage is Stage.DROP_SHORT:
        return options.min_token_length > 0
    if stage is Stage.STEM:
        return options.stem
    return True


def stage_order(variant: Variant | str, options: CleaningOptions | None = None) -> Tuple[Stage, ...]:
    """Stages ``variant`` runs under ``options``, in execution order."""

    resolved = Variant.parse(variant)
    cleaning_options = options or CleaningOptions()
    return tuple(
        stage for stage in VARIANT_STAGES[resolved] if _stage_enabled(stage, resolved, cleaning_options)
    )


def resolve_stop_words(options: CleaningOptions) -> frozenset[str]:
    return load_stop_words(
        options.languages,
        stop_words_path=options.stop_words_path,
        extra_stopwords=options.extra_stopwords,
        include_default=options.include_default_stopwords,
    )


def apply_pipeline(tokens: Iterable[str], stages: Sequence[StageFunction]) -> TokenSequence:
    """Run ``stages`` in order, feeding each one the previous stage's output."""

    result = list(tokens)
    for stage in stages:
        result = stage(result)
    return result


@dataclass(frozen=True)
class Pipeline:
    """A variant's resolved stage list, reusable across any number of inputs."""

    variant: Variant
    stages: Tuple[Stage, ...]
    functions: Tuple[StageFunction, ...] = field(repr=False)

    def __call__(self, tokens: Iterable[str]) -> TokenSequence:
        return apply_pipeline(tokens, self.functions)


def build_pipeline(
    variant: Variant | str,
    options: CleaningOptions | None = None,
    *,
    stop_words: AbstractSet[str] | None = None,
    stemmer: Stemmer | None = None,
) -> Pipeline:
    """Resolve the stages of ``variant`` into callables.

    Stop words and the stemmer are loaded here, when the stages need them,
    so a misconfigured language fails before any token is processed.
    """

    resolved = Variant.parse(variant)
    cleaning_options = options or CleaningOptions()
    stages = stage_order(resolved, cleaning_options)

    functions: List[StageFunction] = []
    for stage in stages:
        if stage is Stage.STOPWORD_FILTER:
            if stop_words is None:
                stop_words = resolve_stop_words(cleaning_options)
            functions.append(filter_stop_words(stop_words))
        elif stage is Stage.DROP_SHORT:
            functions.append(drop_short_tokens(cleaning_options.min_token_length))
        elif stage is Stage.STEM:
            if stemmer is None:
                stemmer = get_stemmer(cleaning_options.stem_language)
            functions.append(stem_stage(stemmer))
        else:
            functions.append(STATIC_STAGES[stage])

    LOGGER.debug("Built %s pipeline: %s", resolved.value, " -> ".join(stage.value for stage in stages))
    return Pipeline(resolved, stages, tuple(functions))


class Cleaner:
    """Single-use cleaner owning a working copy of one token sequence.

    ``clean()`` runs the pipeline once; later calls return the same result
    without re-running any stage. Start from a fresh ``Cleaner`` to clean
    another input.
    """

    def __init__(
        self,
        tokens: Iterable[str],
        variant: Variant | str,
        options: CleaningOptions | None = None,
        *,
        stop_words: AbstractSet[str] | None = None,
        stemmer: Stemmer | None = None,
        pipeline: Pipeline | None = None,
    ) -> None:
        self.variant = Variant.parse(variant)
        self.options = options or CleaningOptions()
        if pipeline is None:
            pipeline = build_pipeline(
                self.variant, self.options, stop_words=stop_words, stemmer=stemmer
            )
        elif pipeline.variant is not self.variant:
            raise ValueError(
                f"Pipeline built for '{pipeline.variant.value}' cannot clean '{self.variant.value}' tokens"
            )
        self.pipeline = pipeline

        working = list(tokens)
        if self.options.html:
            working = strip_markup_tokens(working)
        self._tokens: TokenSequence = working
        self._cleaned = False

    @property
    def tokens(self) -> Tuple[str, ...]:
        return tuple(self._tokens)

    @property
    def cleaned(self) -> bool:
        return self._cleaned

    def clean(self) -> Cleaner:
        if not self._cleaned:
            self._tokens = self.pipeline(self._tokens)
            self._cleaned = True
        return self

    def __repr__(self) -> str:
        state = "cleaned" if self._cleaned else "pending"
        return f"{type(self).__name__}({self.variant.value}, {len(self._tokens)} tokens, {state})"


def clean_tokens(
    tokens: Iterable[str],
    variant: Variant | str,
    options: CleaningOptions | None = None,
    *,
    stop_words: AbstractSet[str] | None = None,
    stemmer: Stemmer | None = None,
) -> List[str]:
    cleaner = Cleaner(tokens, variant, options, stop_words=stop_words, stemmer=stemmer)
    return list(cleaner.clean().tokens)


def clean_title(
    tokens: Iterable[str],
    options: CleaningOptions | None = None,
    *,
    stop_words: AbstractSet[str] | None = None,
    stemmer: Stemmer | None = None,
) -> List[str]:
    """Clean title tokens: ``["Lorem", "ipsum", "dolor", ":"]`` -> ``["lorem", "ipsum", "dolor"]``."""

    return clean_tokens(tokens, Variant.TITLE, options, stop_words=stop_words, stemmer=stemmer)


def clean_author(tokens: Iterable[str], options: CleaningOptions | None = None) -> List[str]:
    """Clean author tokens: ``["John", "W.", "Doe", "(1950-2018)"]`` -> ``["john", "w", "doe"]``."""

    return clean_tokens(tokens, Variant.AUTHOR, options)


def clean_text(
    tokens: Iterable[str],
    options: CleaningOptions | None = None,
    *,
    stop_words: AbstractSet[str] | None = None,
    stemmer: Stemmer | None = None,
) -> List[str]:
    return clean_tokens(tokens, Variant.TEXT, options, stop_words=stop_words, stemmer=stemmer)
