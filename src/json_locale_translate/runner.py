"""Run one translation job with a fixed-delay retry policy."""

from __future__ import annotations

import asyncio
import inspect

from .backend import TranslationBackend
from .errors import BackendError, EmptyInputError
from .log import get_logger
from .models import JobState, TranslationJob, TranslationRequest, TranslationResult

logger = get_logger(__name__)


async def _call_backend(backend: TranslationBackend, request: TranslationRequest):
    """Call the backend, moving blocking implementations onto a worker thread."""
    args = (request.content, request.source_language, request.target_language)
    translate = backend.translate
    if inspect.iscoroutinefunction(translate):
        return await translate(*args)
    result = await asyncio.to_thread(translate, *args)
    if inspect.isawaitable(result):
        result = await result
    return result


def _as_backend_error(error: Exception, language: str, attempt: int) -> BackendError:
    if not isinstance(error, BackendError):
        wrapped = BackendError(
            f"{type(error).__name__}: {error}",
            code=BackendError.UNEXPECTED,
        )
        wrapped.__cause__ = error
        error = wrapped
    if error.language is None:
        error.language = language
    error.attempt = attempt
    return error


async def attempt(
    request: TranslationRequest,
    max_retries: int,
    retry_delay: float,
    backend: TranslationBackend,
) -> TranslationResult:
    """
    Translate ``request`` with up to ``max_retries`` total attempts.

    Returns as soon as one attempt succeeds. Between failed attempts the runner
    sleeps ``retry_delay`` seconds, or the server's retry-after hint for rate
    limit errors. When attempts run out, the failure result carries the last
    error. A request without content fails at once without calling the backend.

    Args:
        request: What to translate
        max_retries: Total number of attempts, at least 1 (1 means no retry)
        retry_delay: Seconds to wait between attempts
        backend: Translation backend; ``translate`` may be sync or async

    Returns:
        A TranslationResult with either content or error populated
    """
    if max_retries < 1:
        raise ValueError(f"max_retries must be at least 1, got {max_retries}")

    job = TranslationJob(request)
    language = job.language

    if request.content is None:
        job.last_error = EmptyInputError(
            f"No content to translate into '{language}'",
            details={"language": language},
        )
        job.transition(JobState.FAILED)
        logger.error("Job for %s has no content, not attempting", language)
        return job.to_result()

    while True:
        attempt_number = job.start_attempt()
        try:
            content = await _call_backend(backend, request)
        except EmptyInputError as e:
            job.last_error = e
            job.transition(JobState.FAILED)
            logger.error("Job for %s has no content: %s", language, e)
            return job.to_result()
        except Exception as e:
            error = _as_backend_error(e, language, attempt_number)
        else:
            if content is not None:
                job.transition(JobState.SUCCEEDED)
                logger.debug("Translated %s on attempt %d", language, attempt_number)
                return job.to_result(content)
            error = _as_backend_error(
                BackendError("Backend returned no content", code=BackendError.INVALID_RESPONSE),
                language,
                attempt_number,
            )

        job.last_error = error
        if attempt_number >= max_retries:
            job.transition(JobState.FAILED)
            logger.error(
                "Translation for %s failed after %d attempt(s): %s",
                language,
                attempt_number,
                error,
            )
            return job.to_result()

        wait_time = retry_delay
        if error.code == BackendError.RATE_LIMIT and error.retry_after:
            wait_time = float(error.retry_after)

        logger.warning(
            "Translation attempt %d/%d for %s failed: %s; retrying in %.1fs",
            attempt_number,
            max_retries,
            language,
            error,
            wait_time,
        )
        await asyncio.sleep(wait_time)
