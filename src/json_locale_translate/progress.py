"""Thread-safe progress reporting for a batch run."""

from __future__ import annotations

import sys
import threading
from dataclasses import replace
from typing import TextIO

from .languages import LanguageRegistry
from .models import ProgressState


class ProgressReporter:
    """
    Counts completed jobs and prints a progress block after each one.

    ``record`` may be called from any task or worker thread. The counter update
    and the rendered snapshot happen under one lock, so no increment is lost and
    printed blocks never interleave.
    """

    def __init__(
        self,
        total_jobs: int,
        registry: LanguageRegistry | None = None,
        stream: TextIO | None = None,
    ):
        if total_jobs < 0:
            raise ValueError("total_jobs must not be negative")
        self.state = ProgressState(total_jobs=total_jobs)
        self.registry = registry or LanguageRegistry()
        self.stream = stream
        self._lock = threading.Lock()

    def record(self, language: str, success: bool, error: Exception | None = None) -> None:
        with self._lock:
            if self.state.completed_count >= self.state.total_jobs:
                raise RuntimeError(
                    f"Progress for '{language}' recorded after all {self.state.total_jobs} jobs completed"
                )
            self.state.completed_count += 1
            if success:
                self.state.success_count += 1
            self.render(replace(self.state), language, success, error)

    def render(
        self,
        snapshot: ProgressState,
        language: str,
        success: bool,
        error: Exception | None,
    ) -> None:
        """Print one progress block. Called with the lock held."""
        stream = self.stream or sys.stdout
        status = "done" if success else "FAILED"
        print("\n=== Translation progress ===", file=stream)
        print(f"Total languages: {snapshot.total_jobs}", file=stream)
        print(f"Completed: {snapshot.completed_count} ({snapshot.percentage:.1f}%)", file=stream)
        print(f"Succeeded: {snapshot.success_count}, failed: {snapshot.failure_count}", file=stream)
        print(f"Last finished: {self.registry.describe(language)} - {status}", file=stream)
        if error is not None:
            print(f"Error: {error}", file=stream)
        print("============================\n", file=stream, flush=True)
