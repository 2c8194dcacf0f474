"""Convenience exports for planner client implementations."""

from .gemini import DEFAULT_GEMINI_MODEL, GeminiClient
from .llm_client import (
    LLMClient,
    LLMClientError,
    LLMRequest,
    LLMResponseFormatError,
    LLMRetryError,
    LLMTransportError,
)
from .offline import OFFLINE_MODEL, OfflinePlannerClient, is_offline_model

__all__ = [
    "DEFAULT_GEMINI_MODEL",
    "GeminiClient",
    "LLMClient",
    "LLMClientError",
    "LLMRequest",
    "LLMResponseFormatError",
    "LLMRetryError",
    "LLMTransportError",
    "OFFLINE_MODEL",
    "OfflinePlannerClient",
    "is_offline_model",
]
