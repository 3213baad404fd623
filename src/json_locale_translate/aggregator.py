"""Partitioning job results and persisting the successful ones."""

from __future__ import annotations

import sys
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Protocol, TextIO

from .errors import PersistenceError
from .languages import LanguageRegistry
from .log import get_logger
from .models import RunReport, TranslationResult

logger = get_logger(__name__)


class OutputWriter(Protocol):
    def save(self, language: str, content: Any) -> Path:
        ...


def partition(results: Iterable[TranslationResult]) -> tuple[dict[str, Any], set[str]]:
    """
    Split results into succeeded documents and failed languages.

    A result with an error is failed and its content is dropped. The outcome
    does not depend on the order of ``results``.

    Raises:
        ValueError: If a language appears in more than one result
    """
    succeeded: dict[str, Any] = {}
    failed: set[str] = set()

    for result in results:
        language = result.target_language
        if language in succeeded or language in failed:
            raise ValueError(f"Language '{language}' appears in more than one result")
        if result.error is not None:
            failed.add(language)
        else:
            succeeded[language] = result.content

    return succeeded, failed


def collect_errors(results: Iterable[TranslationResult]) -> dict[str, Exception]:
    return {r.target_language: r.error for r in results if r.error is not None}


def persist_results(
    succeeded: Mapping[str, Any],
    failed: Iterable[str],
    writer: OutputWriter,
    errors: Mapping[str, Exception] | None = None,
) -> RunReport:
    """
    Save every succeeded document once; a failed save turns the language into a failure.

    Other languages are still written when one save fails.
    """
    report = RunReport(failed=set(failed), errors=dict(errors or {}))

    for language in sorted(succeeded):
        try:
            report.saved[language] = writer.save(language, succeeded[language])
        except PersistenceError as e:
            logger.error("Could not save %s: %s", language, e)
            report.failed.add(language)
            report.errors[language] = e

    return report


def print_report(report: RunReport, registry: LanguageRegistry | None = None, stream: TextIO | None = None) -> None:
    """Print saved files, every failed language with its display name, and the summary."""
    registry = registry or LanguageRegistry()
    stream = stream or sys.stdout

    print("Translation results:", file=stream)
    for language, path in sorted(report.saved.items()):
        print(f"  {registry.describe(language)}: written to {path}", file=stream)

    if report.failed:
        print("\nTranslation failed for the following languages:", file=stream)
        for language in sorted(report.failed):
            error = report.errors.get(language)
            suffix = f" - {error}" if error is not None else ""
            print(f"  - {registry.describe(language)}{suffix}", file=stream)

    print(f"\n{report.summary()}", file=stream)
