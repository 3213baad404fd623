"""Fake backends and writers shared by the translation tests."""

import asyncio
import threading
import time
from pathlib import Path

from json_locale_translate.errors import BackendError, PersistenceError


def prefix_translation(content, target_language):
    """Deterministic stand-in translation: prefix every string value with the language."""
    if isinstance(content, dict):
        return {k: prefix_translation(v, target_language) for k, v in content.items()}
    if isinstance(content, str):
        return f"{target_language}:{content}"
    return content


class PrefixBackend:
    """Async backend that translates by prefixing, optionally failing per language."""

    def __init__(self, failures=None, delay=0.0):
        # language -> number of leading attempts that fail (-1 fails forever)
        self.failures = dict(failures or {})
        self.delay = delay
        self.calls = {}
        self.in_flight = 0
        self.high_watermark = 0

    async def translate(self, content, source_language, target_language):
        self.calls[target_language] = self.calls.get(target_language, 0) + 1
        self.in_flight += 1
        self.high_watermark = max(self.high_watermark, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            remaining = self.failures.get(target_language, 0)
            if remaining == -1 or self.calls[target_language] <= remaining:
                raise BackendError(
                    f"simulated failure for {target_language}",
                    code=BackendError.NETWORK,
                )
            return prefix_translation(content, target_language)
        finally:
            self.in_flight -= 1


class BlockingPrefixBackend:
    """Blocking backend that records how many calls overlap across threads."""

    def __init__(self, delay=0.05):
        self.delay = delay
        self.lock = threading.Lock()
        self.in_flight = 0
        self.high_watermark = 0
        self.threads = set()

    def translate(self, content, source_language, target_language):
        with self.lock:
            self.in_flight += 1
            self.high_watermark = max(self.high_watermark, self.in_flight)
            self.threads.add(threading.get_ident())
        try:
            time.sleep(self.delay)
            return prefix_translation(content, target_language)
        finally:
            with self.lock:
                self.in_flight -= 1


class MemoryWriter:
    """Output writer that keeps saved documents in memory."""

    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.saved = {}

    def save(self, language, content):
        if language in self.fail_for:
            raise PersistenceError(f"disk full for {language}")
        if language in self.saved:
            raise AssertionError(f"{language} saved twice")
        self.saved[language] = content
        return Path(f"/memory/{language}/common.json")
