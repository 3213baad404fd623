"""Environment configuration for json-locale-translate.

Values come from the process environment, with a ``.env`` file in the current
working directory loaded first when present.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from .backend import DEFAULT_MODEL, DEFAULT_TEMPERATURE
from .errors import ConfigError

DEFAULT_MAX_CONCURRENT_JOBS = 30
DEFAULT_MAX_RETRIES = 1
DEFAULT_RETRY_DELAY = 1.0
DEFAULT_LOG_LEVEL = "WARNING"


def load_env_file() -> None:
    """Load variables from a .env file in the current working directory, if any."""
    load_dotenv(find_dotenv(usecwd=True))


def _parse_number(env: Mapping[str, str], name: str, default, cast, minimum):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got '{raw}'", details={"variable": name}) from None
    if value < minimum:
        raise ConfigError(f"{name} must be at least {minimum}, got {value}", details={"variable": name})
    return value


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_concurrent_jobs: int = DEFAULT_MAX_CONCURRENT_JOBS
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """
        Build settings from environment variables.

        Args:
            env: Mapping to read instead of ``os.environ`` (the .env file is not loaded then)

        Raises:
            ConfigError: If a numeric variable cannot be parsed or is out of range
        """
        if env is None:
            load_env_file()
            env = os.environ

        return cls(
            api_key=env.get("OPENAI_API_KEY") or None,
            model=env.get("OPENAI_TRANSLATION_MODEL") or DEFAULT_MODEL,
            temperature=_parse_number(env, "OPENAI_TEMPERATURE", DEFAULT_TEMPERATURE, float, 0.0),
            max_concurrent_jobs=_parse_number(env, "MAX_CONCURRENT_JOBS", DEFAULT_MAX_CONCURRENT_JOBS, int, 1),
            max_retries=_parse_number(env, "MAX_RETRIES", DEFAULT_MAX_RETRIES, int, 1),
            retry_delay=_parse_number(env, "RETRY_DELAY", DEFAULT_RETRY_DELAY, float, 0.0),
            log_level=env.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL,
        )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigError(
                "OPENAI_API_KEY environment variable not set. "
                "Set it in your environment or in a .env file.",
                details={"variable": "OPENAI_API_KEY"},
            )
        return self.api_key
