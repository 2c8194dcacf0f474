"""Client base class shared by all planner (language-model) integrations."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..errors import DayPlanError, PlannerTransportError

__all__ = [
    "LLMClient",
    "LLMClientError",
    "LLMRequest",
    "LLMResponseFormatError",
    "LLMRetryError",
    "LLMTransportError",
]


class LLMClientError(DayPlanError):
    """Base error raised for planner client failures."""


class LLMTransportError(LLMClientError, PlannerTransportError):
    """Raised when the underlying transport fails to return a response."""


class LLMResponseFormatError(LLMClientError, PlannerTransportError):
    """Raised when the service answers without any usable text."""


class LLMRetryError(LLMTransportError):
    """Raised after exhausting retries due to repeated transport failures."""


@dataclass(slots=True)
class LLMRequest:
    """Prompt payload sent to a planner model."""

    prompt: str
    model: Optional[str] = None
    system_prompt: Optional[str] = None
    max_output_tokens: Optional[int] = None

    def to_payload(self, default_model: str) -> Dict[str, Any]:
        """Render a transport-ready ``generateContent`` body."""
        payload: Dict[str, Any] = {
            "model": self.model or default_model,
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": self.prompt}],
                }
            ],
        }
        if self.system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": self.system_prompt}]}

        if self.max_output_tokens:
            payload["generationConfig"] = {"maxOutputTokens": int(self.max_output_tokens)}
        return payload


class LLMClient:
    """Planner collaborator: prompt text in, free-form text out.

    The reply is never trusted; callers extract and re-validate any payload it
    carries. Retry policy lives here and nowhere else.
    """

    def __init__(self, model: str, *, max_attempts: int = 3, retry_delay: float = 0.5) -> None:
        self._model = model
        self._max_attempts = max(1, max_attempts)
        self._retry_delay = retry_delay

    @property
    def model(self) -> str:
        """Return the default model name configured for this client."""
        return self._model

    def complete(self, prompt: str, *, system_prompt: Optional[str] = None) -> str:
        """Send ``prompt`` and return the raw reply text."""
        return self.invoke(LLMRequest(prompt=prompt, system_prompt=system_prompt))

    def invoke(self, request: LLMRequest) -> str:
        """Invoke the underlying model, retrying transport failures."""
        last_error: Optional[LLMClientError] = None
        payload = request.to_payload(self._model)

        for attempt in range(1, self._max_attempts + 1):
            try:
                raw = self._raw_invoke(payload)
            except (LLMTransportError, LLMResponseFormatError) as error:
                last_error = error
                if attempt >= self._max_attempts:
                    break
                time.sleep(self._retry_delay)
                continue
            return raw

        if self._max_attempts == 1 and last_error is not None:
            raise last_error
        message = (
            f"Planner call failed after {self._max_attempts} attempt(s) for model "
            f"{request.model or self._model}"
        )
        raise LLMRetryError(message) from last_error

    def _raw_invoke(self, payload: Dict[str, Any]) -> str:
        """Perform the transport call. Subclasses must implement."""
        raise NotImplementedError("Subclasses must implement _raw_invoke().")
