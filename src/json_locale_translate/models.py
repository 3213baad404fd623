"""Data classes shared by the scheduler, job runner and aggregator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class TranslationRequest:
    """One document to translate from one language into another."""
    source_language: str
    target_language: str
    content: Any


class JobState(Enum):
    PENDING = "pending"
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# Allowed transitions; terminal states have none.
_TRANSITIONS = {
    JobState.PENDING: {JobState.ATTEMPTING, JobState.FAILED},
    JobState.ATTEMPTING: {JobState.ATTEMPTING, JobState.SUCCEEDED, JobState.FAILED},
    JobState.SUCCEEDED: set(),
    JobState.FAILED: set(),
}


@dataclass
class TranslationJob:
    """Runtime state of a request while its task is executing it."""
    request: TranslationRequest
    attempts_made: int = 0
    last_error: Exception | None = None
    state: JobState = JobState.PENDING

    @property
    def language(self) -> str:
        return self.request.target_language

    def transition(self, new_state: JobState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Job for '{self.language}' cannot move from {self.state.value} to {new_state.value}"
            )
        self.state = new_state

    def start_attempt(self) -> int:
        """Mark a new attempt as started and return its 1-based number."""
        self.transition(JobState.ATTEMPTING)
        self.attempts_made += 1
        return self.attempts_made

    def to_result(self, content: Any = None) -> TranslationResult:
        if self.state is JobState.SUCCEEDED:
            return TranslationResult(self.language, content=content, attempts=self.attempts_made)
        if self.state is JobState.FAILED:
            return TranslationResult(self.language, error=self.last_error, attempts=self.attempts_made)
        raise RuntimeError(f"Job for '{self.language}' has not finished ({self.state.value})")


@dataclass
class TranslationResult:
    """Outcome of one job. Exactly one of ``content`` and ``error`` is set."""
    target_language: str
    content: Any = None
    error: Exception | None = None
    attempts: int = 0

    def __post_init__(self):
        if (self.content is None) == (self.error is None):
            raise ValueError(
                f"Result for '{self.target_language}' needs exactly one of content and error"
            )

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class ProgressState:
    total_jobs: int
    completed_count: int = 0
    success_count: int = 0

    @property
    def failure_count(self) -> int:
        return self.completed_count - self.success_count

    @property
    def percentage(self) -> float:
        if not self.total_jobs:
            return 0.0
        return self.completed_count / self.total_jobs * 100


@dataclass
class RunReport:
    """Final outcome of a run after translated documents were written."""
    saved: dict[str, Path] = field(default_factory=dict)
    failed: set[str] = field(default_factory=set)
    errors: dict[str, Exception] = field(default_factory=dict)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    @property
    def languages(self) -> set[str]:
        return set(self.saved) | self.failed

    def summary(self) -> str:
        noun = "failure" if self.failure_count == 1 else "failures"
        return f"Completed with {self.failure_count} {noun} ({len(self.saved)} saved)"
