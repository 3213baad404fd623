"""Exception types raised while translating a locale bundle."""

from __future__ import annotations


class TranslateError(Exception):
    """Base error with an optional machine-readable code and details."""

    default_code = "error"

    def __init__(self, message: str, code: str | None = None, details: dict | None = None):
        super().__init__(message)
        self.code = code or self.default_code
        self.details = details or {}


class ConfigError(TranslateError):
    """Missing credentials, bad settings or an unreadable source file.

    Raised before any job is scheduled and aborts the whole run.
    """

    default_code = "config"


class BackendError(TranslateError):
    """A translation backend call failed.

    The code classifies the failure: ``network``, ``timeout``, ``rate_limit``,
    ``invalid_response``, ``malformed_output`` or ``unexpected``.
    """

    NETWORK = "network"
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    INVALID_RESPONSE = "invalid_response"
    MALFORMED_OUTPUT = "malformed_output"
    UNEXPECTED = "unexpected"

    default_code = UNEXPECTED

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict | None = None,
        language: str | None = None,
        attempt: int | None = None,
        retry_after: float | None = None,
    ):
        super().__init__(message, code=code, details=details)
        self.language = language
        self.attempt = attempt
        self.retry_after = retry_after

    def __str__(self) -> str:
        message = super().__str__()
        context = []
        if self.language:
            context.append(f"language={self.language}")
        if self.attempt:
            context.append(f"attempt={self.attempt}")
        if context:
            return f"{message} ({', '.join(context)})"
        return message


class PersistenceError(TranslateError):
    """Writing a translated document to disk failed."""

    default_code = "persistence"


class EmptyInputError(TranslateError):
    """A job was dispatched without any content to translate."""

    default_code = "empty_input"
