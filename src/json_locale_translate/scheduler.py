"""Bounded-parallelism fan-out of translation jobs over target languages."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Iterable
from typing import Union

from .errors import BackendError
from .log import get_logger
from .models import TranslationResult
from .progress import ProgressReporter

logger = get_logger(__name__)

JobFn = Callable[[str], Union[TranslationResult, Awaitable[TranslationResult]]]


def validate_languages(target_languages: Iterable[str]) -> list[str]:
    """Return the languages as a list, rejecting empty or duplicated input."""
    languages = list(target_languages)
    if not languages:
        raise ValueError("At least one target language is required")

    seen = set()
    duplicates = []
    for code in languages:
        if code in seen and code not in duplicates:
            duplicates.append(code)
        seen.add(code)
    if duplicates:
        raise ValueError(f"Duplicate target languages: {', '.join(duplicates)}")
    return languages


class Scheduler:
    """
    Runs one job per target language with at most ``concurrency_limit`` in flight.

    Every job holds an admission slot for its whole run and gives it back on any
    exit path. Each finished job is reported to the progress reporter before its
    result is collected. ``run`` returns once every job has produced exactly one
    result, in the order the languages were given. A job that raises, or returns
    anything but its own TranslationResult, is recorded as a failure for its language.
    """

    def __init__(self, concurrency_limit: int, reporter: ProgressReporter | None = None):
        if concurrency_limit < 1:
            raise ValueError(f"concurrency_limit must be at least 1, got {concurrency_limit}")
        self.concurrency_limit = concurrency_limit
        self.reporter = reporter

    async def run(self, target_languages: Iterable[str], job_fn: JobFn) -> list[TranslationResult]:
        languages = validate_languages(target_languages)
        semaphore = asyncio.Semaphore(self.concurrency_limit)

        logger.info(
            "Dispatching %d job(s) with concurrency limit %d",
            len(languages),
            self.concurrency_limit,
        )

        tasks = [
            asyncio.create_task(self._run_job(semaphore, language, job_fn), name=f"translate-{language}")
            for language in languages
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # Cancelled from outside: stop and await every job before propagating.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    def run_sync(self, target_languages: Iterable[str], job_fn: JobFn) -> list[TranslationResult]:
        """Blocking wrapper around ``run`` for callers without an event loop."""
        return asyncio.run(self.run(target_languages, job_fn))

    async def _run_job(
        self,
        semaphore: asyncio.Semaphore,
        language: str,
        job_fn: JobFn,
    ) -> TranslationResult:
        async with semaphore:
            try:
                result = await self._invoke(job_fn, language)
            except Exception as e:
                logger.exception("Job for %s raised instead of returning a result", language)
                error = BackendError(f"{type(e).__name__}: {e}", language=language)
                error.__cause__ = e
                result = TranslationResult(language, error=error)

        if not isinstance(result, TranslationResult):
            result = self._invalid_result(language, f"returned {type(result).__name__} instead of a TranslationResult")
        elif result.target_language != language:
            result = self._invalid_result(language, f"returned a result for '{result.target_language}'")

        if self.reporter is not None:
            try:
                self.reporter.record(language, result.succeeded, result.error)
            except Exception:
                logger.exception("Progress reporter failed for %s", language)
        return result

    @staticmethod
    def _invalid_result(language: str, problem: str) -> TranslationResult:
        logger.error("Job for %s %s", language, problem)
        return TranslationResult(language, error=BackendError(f"Job for '{language}' {problem}", language=language))

    @staticmethod
    async def _invoke(job_fn: JobFn, language: str) -> TranslationResult:
        if inspect.iscoroutinefunction(job_fn):
            return await job_fn(language)
        result = await asyncio.to_thread(job_fn, language)
        if inspect.isawaitable(result):
            result = await result
        return result
