"""Command-line interface for json-locale-translate."""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path

from . import __version__
from .config import Settings
from .errors import ConfigError
from .log import configure_logging
from .translator import translate_locale_directory
from .utils import LAYOUT_DIR, LAYOUTS

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_FAILURES = 2
EXIT_INTERRUPTED = 130


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _non_negative_float(value: str) -> float:
    number = float(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="json-locale-translate",
        description="Batch-translate a JSON locale bundle into many languages using OpenAI's API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Translate locales/en/common.json into every locale found in ./locales
  json-locale-translate ./locales

  # Specify base locale and targets
  json-locale-translate ./locales -b en -t de -t es -t fr

  # Flat layout (locales/en.json, locales/de.json, ...)
  json-locale-translate ./locales --layout flat

  # Dry run to see what would be translated
  json-locale-translate ./locales --dry-run

Environment Variables:
  OPENAI_API_KEY             Your OpenAI API key (required)
  OPENAI_TRANSLATION_MODEL   Chat model (default: gpt-4o)
  MAX_CONCURRENT_JOBS        Languages translated at once (default: 30)
  MAX_RETRIES                Total attempts per language (default: 1)
  RETRY_DELAY                Seconds between attempts (default: 1)
  LOG_LEVEL                  Log level (default: WARNING)
        """,
    )

    parser.add_argument(
        "locales_dir",
        type=Path,
        help="Path to the locales directory",
    )

    parser.add_argument(
        "-b",
        "--base-locale",
        type=str,
        default="en",
        help="Source locale code (default: en)",
    )

    parser.add_argument(
        "-t",
        "--target-locale",
        type=str,
        action="append",
        dest="target_locales",
        metavar="CODE",
        help="Target locale code (can be specified multiple times). "
        "If not specified, auto-detects from existing locales in the directory.",
    )

    parser.add_argument(
        "-n",
        "--name",
        type=str,
        default="common",
        help="Bundle file name without .json, for the dir layout (default: common)",
    )

    parser.add_argument(
        "--layout",
        choices=LAYOUTS,
        default=LAYOUT_DIR,
        help="dir: <locale>/<name>.json, flat: <locale>.json (default: dir)",
    )

    parser.add_argument(
        "-c",
        "--context-file",
        type=Path,
        default=None,
        help="Path to JSON file containing translation context and glossary",
    )

    parser.add_argument(
        "-j",
        "--concurrency",
        type=_positive_int,
        default=None,
        help="Maximum languages translated at once (overrides MAX_CONCURRENT_JOBS)",
    )

    parser.add_argument(
        "--max-retries",
        type=_positive_int,
        default=None,
        help="Total attempts per language; 1 means no retry (overrides MAX_RETRIES)",
    )

    parser.add_argument(
        "--retry-delay",
        type=_non_negative_float,
        default=None,
        help="Seconds to wait between attempts (overrides RETRY_DELAY)",
    )

    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="OpenAI model (overrides OPENAI_TRANSLATION_MODEL)",
    )

    parser.add_argument(
        "--structured-outputs",
        action="store_true",
        help="Constrain responses to the source document's JSON schema",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be translated without making API calls",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 if any language failed",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level, e.g. DEBUG or INFO (overrides LOG_LEVEL)",
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.model:
        settings = replace(settings, model=args.model)

    try:
        configure_logging(args.log_level or settings.log_level)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        report = asyncio.run(
            translate_locale_directory(
                locales_dir=args.locales_dir,
                base_locale=args.base_locale,
                target_locales=args.target_locales,
                name=args.name,
                layout=args.layout,
                context_file=args.context_file,
                settings=settings,
                concurrency_limit=args.concurrency,
                max_retries=args.max_retries,
                retry_delay=args.retry_delay,
                structured_outputs=args.structured_outputs,
                dry_run=args.dry_run,
            )
        )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED

    if report is not None and report.failed and args.strict:
        return EXIT_FAILURES
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
