"""Tests for the OpenAI translation backend."""

import asyncio
import json
from types import SimpleNamespace
from unittest import mock

import httpx
import pytest
from openai import APIConnectionError, APIStatusError, APITimeoutError, RateLimitError

from json_locale_translate.backend import OpenAIBackend, TranslationBackend, parse_document, strip_code_fences
from json_locale_translate.errors import BackendError, EmptyInputError
from json_locale_translate.languages import LanguageRegistry

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def completion(content, finish_reason="stop", refusal=None):
    message = SimpleNamespace(content=content, refusal=refusal)
    return SimpleNamespace(choices=[SimpleNamespace(message=message, finish_reason=finish_reason)])


def make_backend(create, **kwargs):
    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    kwargs.setdefault("registry", LanguageRegistry({"en": "English", "fr": "French"}))
    return OpenAIBackend(client=client, **kwargs)


def translate(backend, content, target="fr"):
    return asyncio.run(backend.translate(content, "en", target))


class TestResponseParsing:
    def test_strip_code_fences(self):
        assert strip_code_fences('```json\n{"a": "b"}\n```') == '{"a": "b"}'
        assert strip_code_fences('  {"a": "b"}  ') == '{"a": "b"}'

    def test_parse_document_rejects_free_text(self):
        with pytest.raises(BackendError) as exc_info:
            parse_document("Voici la traduction", expected={"title": "Hello"})
        assert exc_info.value.code == BackendError.MALFORMED_OUTPUT

    def test_parse_document_rejects_non_object(self):
        with pytest.raises(BackendError) as exc_info:
            parse_document('["Bonjour"]', expected={"title": "Hello"})
        assert exc_info.value.code == BackendError.MALFORMED_OUTPUT

    def test_parse_document_rejects_changed_keys(self):
        with pytest.raises(BackendError) as exc_info:
            parse_document('{"titre": "Bonjour"}', expected={"title": "Hello"})
        assert exc_info.value.details == {"missing": ["title"], "extra": ["titre"]}


class TestOpenAIBackend:
    def test_is_a_translation_backend(self):
        assert isinstance(make_backend(mock.AsyncMock()), TranslationBackend)

    def test_successful_translation(self):
        create = mock.AsyncMock(return_value=completion('```json\n{"title": "Bonjour"}\n```'))
        backend = make_backend(create, model="gpt-4o-mini", temperature=0.2)

        result = translate(backend, {"title": "Hello"})

        assert result == {"title": "Bonjour"}
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.2
        assert "response_format" not in kwargs
        prompt = kwargs["messages"][1]["content"]
        assert "from English (en) to French (fr)" in prompt
        assert json.dumps({"title": "Hello"}) in prompt

    def test_context_is_added_to_system_message(self):
        create = mock.AsyncMock(return_value=completion('{"title": "Bonjour"}'))
        backend = make_backend(create, context="**Glossary**:\n- \"Hello\" refers to a greeting")

        translate(backend, {"title": "Hello"})

        system = create.call_args.kwargs["messages"][0]["content"]
        assert system.endswith('- "Hello" refers to a greeting')
        assert "{language}" in system

    def test_structured_outputs_sends_schema(self):
        create = mock.AsyncMock(return_value=completion('{"title": "Bonjour"}'))
        backend = make_backend(create, structured_outputs=True)

        translate(backend, {"title": "Hello"})

        response_format = create.call_args.kwargs["response_format"]
        assert response_format["type"] == "json_schema"
        assert response_format["json_schema"]["schema"]["required"] == ["title"]

    def test_malformed_output(self):
        create = mock.AsyncMock(return_value=completion("Bonjour!"))
        with pytest.raises(BackendError) as exc_info:
            translate(make_backend(create), {"title": "Hello"})
        assert exc_info.value.code == BackendError.MALFORMED_OUTPUT
        assert exc_info.value.language == "fr"

    @pytest.mark.parametrize(
        "response",
        [
            completion('{"title": "Bon', finish_reason="length"),
            completion(None, refusal="I can't help with that"),
            completion(""),
            SimpleNamespace(choices=[]),
        ],
    )
    def test_invalid_responses(self, response):
        create = mock.AsyncMock(return_value=response)
        with pytest.raises(BackendError) as exc_info:
            translate(make_backend(create), {"title": "Hello"})
        assert exc_info.value.code == BackendError.INVALID_RESPONSE

    def test_none_content_is_empty_input(self):
        create = mock.AsyncMock()
        with pytest.raises(EmptyInputError):
            translate(make_backend(create), None)
        create.assert_not_called()


class TestErrorClassification:
    def test_rate_limit_with_retry_after(self):
        response = httpx.Response(429, headers={"retry-after": "3"}, request=REQUEST)
        error = RateLimitError("Rate limit reached", response=response, body=None)
        create = mock.AsyncMock(side_effect=error)

        with pytest.raises(BackendError) as exc_info:
            translate(make_backend(create), {"title": "Hello"})

        assert exc_info.value.code == BackendError.RATE_LIMIT
        assert exc_info.value.retry_after == 3.0
        assert exc_info.value.__cause__ is error

    def test_timeout(self):
        create = mock.AsyncMock(side_effect=APITimeoutError(request=REQUEST))
        with pytest.raises(BackendError) as exc_info:
            translate(make_backend(create), {"title": "Hello"})
        assert exc_info.value.code == BackendError.TIMEOUT

    def test_connection_error(self):
        create = mock.AsyncMock(side_effect=APIConnectionError(request=REQUEST))
        with pytest.raises(BackendError) as exc_info:
            translate(make_backend(create), {"title": "Hello"})
        assert exc_info.value.code == BackendError.NETWORK

    def test_status_error(self):
        response = httpx.Response(500, request=REQUEST)
        error = APIStatusError("Internal error", response=response, body=None)
        create = mock.AsyncMock(side_effect=error)

        with pytest.raises(BackendError) as exc_info:
            translate(make_backend(create), {"title": "Hello"})

        assert exc_info.value.code == BackendError.INVALID_RESPONSE
        assert exc_info.value.details == {"status_code": 500}
