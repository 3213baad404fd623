"""End-to-end batch translation of a locale bundle."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any, TextIO

from .aggregator import OutputWriter, collect_errors, partition, persist_results, print_report
from .backend import OpenAIBackend, TranslationBackend
from .config import Settings
from .errors import ConfigError
from .files import JsonOutputWriter, JsonSourceLoader, locale_path
from .languages import LanguageRegistry
from .log import get_logger
from .models import RunReport, TranslationRequest
from .progress import ProgressReporter
from .runner import attempt
from .scheduler import Scheduler, validate_languages
from .utils import CONTEXT_FILE_NAME, LAYOUT_DIR, detect_target_locales, load_context

logger = get_logger(__name__)


def make_job_fn(
    source_language: str,
    content: Any,
    backend: TranslationBackend,
    max_retries: int,
    retry_delay: float,
):
    """Build the per-language job the scheduler runs: one request through the retrying runner."""

    async def job_fn(target_language: str):
        request = TranslationRequest(source_language, target_language, content)
        return await attempt(request, max_retries, retry_delay, backend)

    return job_fn


async def translate_bundle(
    content: Any,
    source_language: str,
    target_languages: Iterable[str],
    backend: TranslationBackend,
    writer: OutputWriter,
    concurrency_limit: int,
    max_retries: int,
    retry_delay: float,
    registry: LanguageRegistry | None = None,
    stream: TextIO | None = None,
) -> RunReport:
    """
    Translate ``content`` into every target language and save the results.

    Jobs run concurrently, bounded by ``concurrency_limit``. A language that
    fails translation or cannot be saved ends up in ``RunReport.failed``; it
    never stops the other languages.
    """
    languages = validate_languages(target_languages)
    reporter = ProgressReporter(len(languages), registry=registry, stream=stream)
    scheduler = Scheduler(concurrency_limit, reporter)

    job_fn = make_job_fn(source_language, content, backend, max_retries, retry_delay)
    results = await scheduler.run(languages, job_fn)

    succeeded, failed = partition(results)
    logger.info("%d language(s) translated, %d failed", len(succeeded), len(failed))
    return persist_results(succeeded, failed, writer, collect_errors(results))


async def translate_locale_directory(
    locales_dir: Path,
    base_locale: str = "en",
    target_locales: list[str] | None = None,
    name: str = "common",
    layout: str = LAYOUT_DIR,
    context_file: Path | None = None,
    settings: Settings | None = None,
    concurrency_limit: int | None = None,
    max_retries: int | None = None,
    retry_delay: float | None = None,
    structured_outputs: bool = False,
    dry_run: bool = False,
    backend: TranslationBackend | None = None,
    registry: LanguageRegistry | None = None,
    stream: TextIO | None = None,
) -> RunReport | None:
    """
    Translate the base locale bundle in a directory into the target locales.

    Args:
        locales_dir: Path to the locales directory
        base_locale: Source locale code (default: 'en')
        target_locales: List of target locale codes, or None to auto-detect
        name: Bundle file name without extension, for the 'dir' layout
        layout: 'dir' (<locale>/<name>.json) or 'flat' (<locale>.json)
        context_file: Optional path to context JSON file; defaults to
            translation-context.json in locales_dir when present
        settings: Settings to use instead of reading the environment
        concurrency_limit, max_retries, retry_delay: Override the settings
        structured_outputs: Ask the OpenAI backend for schema-constrained JSON
        dry_run: If True, show what would be translated without making API calls
        backend: Translation backend to use instead of OpenAI
        registry: Language display names for output

    Returns:
        The RunReport, or None when nothing was translated (dry run or no targets)

    Raises:
        ConfigError: Missing directory, source file, context file or API key
        ValueError: Duplicate target locales
    """
    locales_dir = Path(locales_dir)
    settings = settings or Settings.from_env()
    registry = registry or LanguageRegistry.default()

    if not locales_dir.is_dir():
        raise ConfigError(f"Locales directory does not exist: {locales_dir}")

    if context_file is None:
        default_context = locales_dir / CONTEXT_FILE_NAME
        if default_context.exists():
            context_file = default_context
    context = load_context(context_file)

    source_file = locale_path(locales_dir, base_locale, layout, name)
    if not source_file.exists():
        raise ConfigError(f"Base locale file not found: {source_file}")

    if target_locales is None:
        target_locales = detect_target_locales(locales_dir, base_locale, layout, name)
    elif base_locale in target_locales:
        print(f"Skipping {base_locale}: it is the base locale", file=stream)
        target_locales = [code for code in target_locales if code != base_locale]

    if not target_locales:
        print("No target locales found or specified. Nothing to translate.", file=stream)
        return None

    # Duplicates would write the same file twice; reject them before any output.
    target_locales = validate_languages(target_locales)

    concurrency_limit = concurrency_limit or settings.max_concurrent_jobs
    max_retries = max_retries or settings.max_retries
    retry_delay = settings.retry_delay if retry_delay is None else retry_delay
    writer = JsonOutputWriter(locales_dir, layout, name)

    print(f"Base locale: {base_locale}", file=stream)
    print(f"Target locales: {', '.join(target_locales)}", file=stream)
    print(f"Source file: {source_file}", file=stream)
    print(f"Concurrency: {concurrency_limit}, attempts per language: {max_retries}", file=stream)
    if context:
        print(f"Context: loaded from {context_file}", file=stream)
    print(file=stream)

    if dry_run:
        print("Dry run mode - no translations will be performed.", file=stream)
        print("\nWould translate to:", file=stream)
        for target_code in target_locales:
            output_file = writer.path_for(target_code)
            exists = " (exists)" if output_file.exists() else " (new)"
            print(f"  - {registry.describe(target_code)} -> {output_file}{exists}", file=stream)
        return None

    if backend is None:
        settings.require_api_key()
        backend = OpenAIBackend.from_settings(settings, context=context, structured_outputs=structured_outputs)

    content = JsonSourceLoader(source_file).load()

    print(f"Translating to {len(target_locales)} languages in parallel...", file=stream)
    report = await translate_bundle(
        content,
        base_locale,
        target_locales,
        backend,
        writer,
        concurrency_limit=concurrency_limit,
        max_retries=max_retries,
        retry_delay=retry_delay,
        registry=registry,
        stream=stream,
    )
    print_report(report, registry, stream)
    return report
