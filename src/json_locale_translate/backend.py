"""Translation backends: the protocol the runner calls and the OpenAI implementation."""

from __future__ import annotations

import json
import re
from typing import Any, Protocol, runtime_checkable

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    RateLimitError,
)

from .errors import BackendError, EmptyInputError
from .languages import LanguageRegistry
from .log import get_logger
from .utils import generate_schema_from_value

logger = get_logger(__name__)

DEFAULT_MODEL = "gpt-4o"
DEFAULT_TEMPERATURE = 0.3

_CODE_FENCE = re.compile(r"```(?:json)?\n?|\n?```")


@runtime_checkable
class TranslationBackend(Protocol):
    """Anything that can translate a structured document.

    ``translate`` may be a coroutine function or a blocking function; the job
    runner runs blocking implementations on a worker thread.
    """

    def translate(self, content: Any, source_language: str, target_language: str) -> Any:
        ...


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences the model sometimes wraps JSON in."""
    return _CODE_FENCE.sub("", text).strip()


def parse_document(text: str, expected: Any = None) -> dict:
    """
    Parse a model reply back into a document.

    Args:
        text: Raw reply text, possibly wrapped in code fences
        expected: Source document; when it is a dict the reply must have the same keys

    Returns:
        The parsed document

    Raises:
        BackendError: With code 'malformed_output' if the reply is not a matching JSON object
    """
    cleaned = strip_code_fences(text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise BackendError(
            f"Invalid JSON in response: {e}",
            code=BackendError.MALFORMED_OUTPUT,
            details={"response": cleaned[:500]},
        ) from e

    if not isinstance(parsed, dict):
        raise BackendError(
            f"Expected a JSON object in response, got {type(parsed).__name__}",
            code=BackendError.MALFORMED_OUTPUT,
            details={"response": cleaned[:500]},
        )

    if isinstance(expected, dict) and set(parsed) != set(expected):
        missing = sorted(set(expected) - set(parsed))
        extra = sorted(set(parsed) - set(expected))
        raise BackendError(
            "Response keys do not match the source document",
            code=BackendError.MALFORMED_OUTPUT,
            details={"missing": missing, "extra": extra},
        )

    return parsed


def _retry_after(error: RateLimitError) -> float | None:
    value = getattr(error, "retry_after", None)
    if value is None:
        response = getattr(error, "response", None)
        headers = getattr(response, "headers", None) or {}
        value = headers.get("retry-after")
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


class OpenAIBackend:
    """Translates documents with the OpenAI chat completions API."""

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        context: str = "",
        structured_outputs: bool = False,
        registry: LanguageRegistry | None = None,
    ):
        self.client = client if client is not None else AsyncOpenAI(api_key=api_key)
        self.model = model
        self.temperature = temperature
        self.context = context
        self.structured_outputs = structured_outputs
        self.registry = registry or LanguageRegistry.default()

    @classmethod
    def from_settings(cls, settings, context: str = "", structured_outputs: bool = False) -> OpenAIBackend:
        return cls(
            api_key=settings.api_key,
            model=settings.model,
            temperature=settings.temperature,
            context=context,
            structured_outputs=structured_outputs,
        )

    def build_messages(self, content: Any, source_language: str, target_language: str) -> list[dict]:
        source_name = self.registry.display_name(source_language)
        target_name = self.registry.display_name(target_language)

        system_content = f"""You are a professional translator specializing in software localization. The content to translate is provided as JSON. You provide the output as JSON matching the exact same structure.

Rules:
- Maintain the exact JSON structure and keys; do not translate keys
- Only translate the values
- Preserve placeholders like {{language}}, {{number}} or {{step}} unchanged
- Keep HTML tags, formatting and line breaks (\\n) intact
- Keep technical terms consistent and preserve numbers and units
- Adapt cultural nuances naturally for the target language
- Return ONLY the raw JSON, without Markdown formatting or code blocks

{self.context}""".rstrip()

        source_text = json.dumps(content, ensure_ascii=False)
        prompt = (
            f"Translate the following JSON from {source_name} ({source_language}) "
            f"to {target_name} ({target_language}):\n```\n{source_text}\n```\n"
        )
        return [
            {"role": "system", "content": system_content},
            {"role": "user", "content": prompt},
        ]

    async def translate(self, content: Any, source_language: str, target_language: str) -> dict:
        if content is None:
            raise EmptyInputError(
                f"No content to translate into '{target_language}'",
                details={"language": target_language},
            )

        request = {
            "model": self.model,
            "messages": self.build_messages(content, source_language, target_language),
            "temperature": self.temperature,
        }
        if self.structured_outputs and isinstance(content, dict):
            request["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": "translation_output",
                    "schema": generate_schema_from_value(content),
                    "strict": True,
                },
            }

        logger.debug("Requesting %s translation from %s (model: %s)", target_language, source_language, self.model)
        try:
            response = await self.client.chat.completions.create(**request)
        except RateLimitError as e:
            raise BackendError(
                f"Rate limited: {e}",
                code=BackendError.RATE_LIMIT,
                language=target_language,
                retry_after=_retry_after(e),
            ) from e
        except APITimeoutError as e:
            raise BackendError(f"Request timed out: {e}", code=BackendError.TIMEOUT, language=target_language) from e
        except APIConnectionError as e:
            raise BackendError(f"Connection error: {e}", code=BackendError.NETWORK, language=target_language) from e
        except APIStatusError as e:
            raise BackendError(
                f"API error ({e.status_code}): {e}",
                code=BackendError.INVALID_RESPONSE,
                language=target_language,
                details={"status_code": e.status_code},
            ) from e

        if not response.choices:
            raise BackendError("No choices in response", code=BackendError.INVALID_RESPONSE, language=target_language)

        choice = response.choices[0]
        message = choice.message
        if getattr(message, "refusal", None):
            raise BackendError(
                f"Model refused to translate: {message.refusal}",
                code=BackendError.INVALID_RESPONSE,
                language=target_language,
            )
        if choice.finish_reason == "length":
            raise BackendError(
                "Response was truncated due to length limit",
                code=BackendError.INVALID_RESPONSE,
                language=target_language,
            )
        if not message.content:
            raise BackendError("Empty response content", code=BackendError.INVALID_RESPONSE, language=target_language)

        logger.debug("Response for %s: %s", target_language, message.content)

        try:
            return parse_document(message.content, expected=content)
        except BackendError as e:
            e.language = target_language
            raise
