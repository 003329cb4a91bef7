"""AI summarization package."""

from __future__ import annotations

from .prompt import CHUNK_SCHEMA, FINAL_SCHEMA, SYSTEM_PROMPT, build_header
from .provider import ChatRequest, GeminiProvider, OpenAIChatProvider, ProviderPort, build_provider
from .summarizer import AiSummarizer

__all__ = [
    "AiSummarizer",
    "CHUNK_SCHEMA",
    "ChatRequest",
    "FINAL_SCHEMA",
    "GeminiProvider",
    "OpenAIChatProvider",
    "ProviderPort",
    "SYSTEM_PROMPT",
    "build_header",
    "build_provider",
]
