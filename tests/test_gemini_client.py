from __future__ import annotations

import json

import pytest

from dayplan.errors import PlannerTransportError
from dayplan.models.gemini import GeminiClient
from dayplan.models.llm_client import LLMResponseFormatError, LLMRetryError, LLMTransportError


def _make_response_payload(*texts: str) -> str:
    response = {
        "candidates": [
            {
                "content": {
                    "role": "model",
                    "parts": [{"text": text} for text in texts],
                },
                "finishReason": "STOP",
            }
        ],
        "modelVersion": "gemini-2.5-flash-lite",
    }
    return json.dumps(response)


def test_gemini_client_returns_candidate_text() -> None:
    captured: list[dict] = []

    def transport(payload: dict) -> str:
        captured.append(payload)
        return _make_response_payload('```json\n{"assignments": []}', "\n```")

    client = GeminiClient(model="gemini-2.5-flash-lite", transport=transport)
    text = client.complete("Plan my day")

    assert text == '```json\n{"assignments": []}\n```'
    (payload,) = captured
    assert payload["model"] == "gemini-2.5-flash-lite"
    assert payload["contents"][0]["parts"][0]["text"] == "Plan my day"
    assert payload["generationConfig"]["maxOutputTokens"] == 1000


def test_gemini_client_passes_through_plain_text_transport() -> None:
    client = GeminiClient(transport=lambda _: "Here you go: {\"assignments\": []}")
    assert client.complete("prompt") == 'Here you go: {"assignments": []}'


def test_gemini_client_without_text_raises_format_error() -> None:
    def transport(_: dict) -> str:
        return json.dumps({"candidates": [{"content": {"parts": []}, "finishReason": "SAFETY"}]})

    client = GeminiClient(transport=transport, max_attempts=1)
    with pytest.raises(LLMResponseFormatError):
        client.complete("prompt")


def test_gemini_client_timeout_maps_to_transport_error() -> None:
    calls = []

    def transport(_: dict) -> str:
        calls.append(1)
        raise TimeoutError("read timed out")

    client = GeminiClient(transport=transport, max_attempts=3, retry_delay=0)
    with pytest.raises(LLMRetryError) as excinfo:
        client.complete("prompt")

    assert len(calls) == 3
    assert isinstance(excinfo.value, PlannerTransportError)
    assert isinstance(excinfo.value.__cause__, LLMTransportError)


def test_gemini_client_single_attempt_reraises_original_error() -> None:
    def transport(_: dict) -> str:
        raise LLMTransportError("HTTP 503: overloaded")

    client = GeminiClient(transport=transport, max_attempts=1)
    with pytest.raises(LLMTransportError, match="503"):
        client.complete("prompt")


def test_gemini_client_retries_then_succeeds() -> None:
    replies = iter([ConnectionResetError("reset"), _make_response_payload("ok")])

    def transport(_: dict) -> str:
        reply = next(replies)
        if isinstance(reply, Exception):
            raise reply
        return reply

    client = GeminiClient(transport=transport, max_attempts=2, retry_delay=0)
    assert client.complete("prompt") == "ok"


def test_gemini_client_requires_api_key_for_http(monkeypatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(ValueError, match="API key"):
        GeminiClient()


def test_gemini_client_timeout_env_override(monkeypatch) -> None:
    monkeypatch.setenv("DAYPLAN_TIMEOUT", "12.5")
    client = GeminiClient(transport=lambda _: "x")
    assert client._timeout == 12.5


class _FakeHTTPResponse:
    status = 200

    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "_FakeHTTPResponse":
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None


def test_gemini_http_transport_posts_without_model_field(monkeypatch) -> None:
    sent = []

    def fake_urlopen(request, timeout):
        sent.append((request, timeout))
        return _FakeHTTPResponse(_make_response_payload("ok").encode("utf-8"))

    monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)
    monkeypatch.delenv("DAYPLAN_TIMEOUT", raising=False)
    client = GeminiClient(api_key="test-key", timeout=5)

    assert client.complete("prompt") == "ok"
    ((request, timeout),) = sent
    assert request.full_url.endswith("/models/gemini-2.5-flash-lite:generateContent")
    assert request.get_header("X-goog-api-key") == "test-key"
    assert "model" not in json.loads(request.data)
    assert timeout == 5


def test_gemini_invalid_utf8_is_a_retried_transport_error(monkeypatch) -> None:
    calls = []

    def fake_urlopen(request, timeout):
        calls.append(1)
        return _FakeHTTPResponse(b"\xff\xfe not utf-8")

    monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)
    monkeypatch.delenv("DAYPLAN_TIMEOUT", raising=False)
    client = GeminiClient(api_key="test-key", max_attempts=2, retry_delay=0)

    with pytest.raises(LLMRetryError) as excinfo:
        client.complete("prompt")

    assert len(calls) == 2
    assert isinstance(excinfo.value.__cause__, LLMTransportError)
    assert "UTF-8" in str(excinfo.value.__cause__)
