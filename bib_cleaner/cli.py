from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import IO, Iterable, List, Sequence

from .cleaning import Cleaner, CleaningOptions, Pipeline, Variant, build_pipeline
from .resources import DEFAULT_LANGUAGES, ResourceLoadError
from .types import CleanedRecord

LOGGER = logging.getLogger(__name__)


def env_path(var_name: str, default: str | None = None) -> Path | None:
    value = os.getenv(var_name, default)
    return Path(value) if value else None


def env_languages(var_name: str, default: Sequence[str]) -> list[str]:
    value = os.getenv(var_name)
    if not value:
        return list(default)
    return [language.strip() for language in value.split(",") if language.strip()]


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--input",
        type=Path,
        default=None,
        help="File with one record per line, tokens separated by whitespace (default: stdin)",
    )
    common.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Destination for cleaned records (default: stdout)",
    )
    common.add_argument(
        "--format",
        choices=["lines", "json"],
        default=os.getenv("BIB_CLEANER_FORMAT", "lines"),
        help="Output format (default: %(default)s or BIB_CLEANER_FORMAT)",
    )
    common.add_argument(
        "--language",
        action="append",
        dest="languages",
        default=None,
        help="Stop word language, can be repeated "
        "(default: all of BIB_CLEANER_LANGUAGES or %s)" % ",".join(DEFAULT_LANGUAGES),
    )
    common.add_argument(
        "--stop-words",
        type=Path,
        default=env_path("STOP_WORDS_PATH"),
        help="Optional stop word file to merge with defaults (or override if --no-default-stopwords)",
    )
    common.add_argument(
        "--extra-stopword",
        action="append",
        default=[],
        help="Additional stop words (can be repeated)",
    )
    common.add_argument(
        "--no-default-stopwords",
        action="store_false",
        dest="include_default_stopwords",
        help="Do not use NLTK's stop word lists",
    )
    common.add_argument(
        "--fold-diacritics",
        action="store_const",
        const=True,
        dest="fold_diacritics",
        default=None,
        help="Replace accented letters with their base letter",
    )
    common.add_argument(
        "--keep-diacritics",
        action="store_const",
        const=False,
        dest="fold_diacritics",
        help="Keep accented letters, even for free text",
    )
    common.add_argument(
        "--strip-digits",
        action="store_true",
        help="Remove digits from tokens",
    )
    common.add_argument(
        "--min-token-length",
        type=int,
        default=int(os.getenv("MIN_TOKEN_LENGTH", "0")),
        help="Minimum token length to keep for titles and text (default: %(default)s or MIN_TOKEN_LENGTH)",
    )
    common.add_argument(
        "--drop-subtitle",
        action="store_true",
        help="Only keep a title up to its first strong punctuation mark",
    )
    common.add_argument(
        "--strip-annotations",
        action="store_true",
        help="Remove parenthesized and bracketed token runs",
    )
    common.add_argument(
        "--stem",
        action="store_true",
        help="Stem title and text tokens with a Snowball stemmer",
    )
    common.add_argument(
        "--stem-language",
        default=os.getenv("STEM_LANGUAGE", "english"),
        help="Snowball stemmer language (default: %(default)s or STEM_LANGUAGE)",
    )
    common.add_argument(
        "--html",
        action="store_true",
        help="Strip HTML tags and decode entities before cleaning",
    )
    common.add_argument(
        "--log-level",
        default=os.getenv("BIB_CLEANER_LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: %(default)s or BIB_CLEANER_LOG_LEVEL)",
    )

    parser = argparse.ArgumentParser(description="Bibliographic token cleaning utilities")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("title", parents=[common], help="Clean titles")
    subparsers.add_parser("author", parents=[common], help="Clean author names")
    subparsers.add_parser("text", parents=[common], help="Clean free text")
    return parser


def options_from_args(args: argparse.Namespace) -> CleaningOptions:
    languages = args.languages or env_languages("BIB_CLEANER_LANGUAGES", DEFAULT_LANGUAGES)
    return CleaningOptions(
        languages=tuple(languages),
        include_default_stopwords=args.include_default_stopwords,
        stop_words_path=args.stop_words,
        extra_stopwords=tuple(args.extra_stopword),
        fold_diacritics=args.fold_diacritics,
        strip_digits=args.strip_digits,
        min_token_length=args.min_token_length,
        drop_subtitle=args.drop_subtitle,
        strip_annotations=args.strip_annotations,
        stem=args.stem,
        stem_language=args.stem_language,
        html=args.html,
    )


def clean_lines(
    lines: Iterable[str], pipeline: Pipeline, options: CleaningOptions
) -> List[CleanedRecord]:
    """Whitespace-tokenize and clean each line with a shared pipeline."""

    records: List[CleanedRecord] = []
    for line in lines:
        text = line.rstrip("\n")
        cleaner = Cleaner(text.split(), pipeline.variant, options, pipeline=pipeline)
        records.append({"input": text, "tokens": list(cleaner.clean().tokens)})
    LOGGER.info("Cleaned %d %s records", len(records), pipeline.variant.value)
    return records


def write_records(records: Iterable[CleanedRecord], outfile: IO[str], output_format: str) -> None:
    if output_format == "json":
        json.dump(list(records), outfile, ensure_ascii=False)
        outfile.write("\n")
        return
    for record in records:
        outfile.write(" ".join(record["tokens"]) + "\n")


def _read_lines(input_path: Path | None) -> list[str]:
    if input_path is None:
        return sys.stdin.readlines()
    LOGGER.info("Reading records from %s", input_path)
    with input_path.open("r", encoding="utf-8") as infile:
        return infile.readlines()


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="[%(levelname)s] %(message)s")

    try:
        options = options_from_args(args)
        pipeline = build_pipeline(Variant.parse(args.command), options)
    except (ResourceLoadError, ValueError) as exc:
        parser.exit(2, f"{parser.prog}: error: {exc}\n")

    records = clean_lines(_read_lines(args.input), pipeline, options)

    if args.output is None:
        write_records(records, sys.stdout, args.format)
        return
    args.output.parent.mkdir(parents=True, exist_ok=True)
    LOGGER.info("Writing cleaned records to %s", args.output)
    with args.output.open("w", encoding="utf-8") as outfile:
        write_records(records, outfile, args.format)


if __name__ == "__main__":
    main()
