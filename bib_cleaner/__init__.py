"""Normalization of pre-tokenized bibliographic titles, author names and text."""

from .cleaning import (
    Cleaner,
    CleaningOptions,
    Pipeline,
    Stage,
    Variant,
    build_pipeline,
    clean_author,
    clean_text,
    clean_title,
    clean_tokens,
)
from .resources import ResourceLoadError, StopwordCatalog, UnknownLanguageError
from .types import CleanedRecord

__all__ = [
    "clean_title",
    "clean_author",
    "clean_text",
    "clean_tokens",
    "build_pipeline",
    "Cleaner",
    "CleaningOptions",
    "Pipeline",
    "Stage",
    "Variant",
    "StopwordCatalog",
    "UnknownLanguageError",
    "ResourceLoadError",
    "CleanedRecord",
]
