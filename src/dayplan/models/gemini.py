"""Gemini client that speaks the ``generateContent`` REST API."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, Dict, Optional

from .llm_client import LLMClient, LLMRequest, LLMResponseFormatError, LLMTransportError

__all__ = ["DEFAULT_GEMINI_MODEL", "GeminiClient"]

LOGGER = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-lite"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

Transport = Callable[[Dict[str, Any]], str]


class GeminiClient(LLMClient):
    """Thin adapter around the Gemini ``models/*:generateContent`` endpoint."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_GEMINI_MODEL,
        transport: Optional[Transport] = None,
        timeout: float = 60.0,
        max_output_tokens: Optional[int] = 1000,
        max_attempts: int = 3,
        retry_delay: float = 0.5,
    ) -> None:
        super().__init__(model=model, max_attempts=max_attempts, retry_delay=retry_delay)
        self._api_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        self._base_url = base_url.rstrip("/")
        timeout_override = os.getenv("DAYPLAN_TIMEOUT")
        if timeout_override:
            try:
                parsed = float(timeout_override)
                if parsed > 0:
                    timeout = parsed
            except ValueError:
                pass
        self._timeout = timeout
        self._max_output_tokens = max_output_tokens
        self._transport = transport or self._http_transport

        if transport is None and not self._api_key:
            raise ValueError("An API key is required when using the default transport.")

    def complete(self, prompt: str, *, system_prompt: Optional[str] = None) -> str:
        request = LLMRequest(
            prompt=prompt,
            system_prompt=system_prompt,
            max_output_tokens=self._max_output_tokens,
        )
        return self.invoke(request)

    def _raw_invoke(self, payload: Dict[str, Any]) -> str:
        """Send the request over the configured transport."""
        try:
            raw_response = self._transport(payload)
        except LLMTransportError:
            raise
        except TimeoutError as error:
            raise LLMTransportError("Gemini request timed out.") from error
        except OSError as error:
            raise LLMTransportError(f"Transport rejected the request: {error}") from error

        text = self._extract_text(raw_response)
        if text is None:
            raise LLMResponseFormatError("Gemini response did not contain any text output.")
        return text

    def _http_transport(self, payload: Dict[str, Any]) -> str:
        """Default HTTP transport targeting the public Gemini endpoint."""
        import urllib.error
        import urllib.request

        body = {key: value for key, value in payload.items() if key != "model"}
        model = payload.get("model") or self.model
        url = f"{self._base_url}/models/{model}:generateContent"
        LOGGER.debug("POST %s", url)

        request = urllib.request.Request(
            url,
            data=json.dumps(body).encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "x-goog-api-key": self._api_key or "",
                "User-Agent": "dayplan/0.1",
            },
            method="POST",
        )

        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                raw = response.read()
                status = getattr(response, "status", 200)
        except TimeoutError as error:  # pragma: no cover - network-dependent
            raise LLMTransportError("Gemini response timed out.") from error
        except urllib.error.HTTPError as error:  # pragma: no cover - network-dependent
            message = error.read().decode("utf-8", errors="ignore")
            raise LLMTransportError(f"HTTP {error.code}: {message}") from error
        except urllib.error.URLError as error:  # pragma: no cover - network-dependent
            raise LLMTransportError(f"Failed to reach Gemini endpoint: {error.reason}") from error

        if status >= 400:
            raise LLMTransportError(f"Unexpected HTTP status {status}")

        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as error:
            raise LLMTransportError(f"Gemini response was not valid UTF-8: {error}") from error

    @staticmethod
    def _extract_text(raw_response: str) -> Optional[str]:
        """Return the concatenated text parts of the first candidate."""
        if not raw_response or not raw_response.strip():
            return None

        try:
            data = json.loads(raw_response)
        except json.JSONDecodeError:
            # Transports may hand back the model text directly.
            return raw_response

        if not isinstance(data, dict):
            return raw_response

        candidates = data.get("candidates")
        if not isinstance(candidates, list):
            # Not a generateContent envelope; treat the body as the reply.
            return None if "error" in data else raw_response

        for candidate in candidates:
            if not isinstance(candidate, dict):
                continue
            content = candidate.get("content")
            parts = content.get("parts") if isinstance(content, dict) else None
            if not isinstance(parts, list):
                continue
            texts = [
                part["text"]
                for part in parts
                if isinstance(part, dict) and isinstance(part.get("text"), str)
            ]
            joined = "".join(texts)
            if joined.strip():
                return joined
        return None
