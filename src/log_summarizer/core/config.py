"""Summarizer configuration and environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Literal

ProviderName = Literal["openai", "gemini"]

_PROVIDERS: tuple[str, ...] = ("openai", "gemini")

DEFAULT_MODELS: dict[str, str] = {
    "openai": "gpt-4.1-mini",
    "gemini": "gemini-2.5-flash-lite",
}

# Environment fallbacks for the provider credential, in lookup order.
_API_KEY_ENV: dict[str, tuple[str, ...]] = {
    "openai": ("OPENAI_API_KEY",),
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}


@dataclass(frozen=True, slots=True)
class SummarizerConfig:
    provider: ProviderName = "openai"
    model: str = "gpt-4.1-mini"
    base_url: str = "https://api.openai.com/v1"
    api_key: str | None = None

    logs_root: str = "logs"
    max_chunk_size: int = 6000

    temperature: float = 0.3
    request_timeout: float = 120.0

    def resolve_api_key(self) -> str | None:
        """Return the configured credential, falling back to the environment."""
        if self.api_key and self.api_key.strip():
            return self.api_key.strip()
        for name in _API_KEY_ENV.get(self.provider, ()):
            value = os.getenv(name)
            if value and value.strip():
                return value.strip()
        return None

    def has_credential(self) -> bool:
        return self.resolve_api_key() is not None

    def credential_env_names(self) -> tuple[str, ...]:
        return _API_KEY_ENV.get(self.provider, ())


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < 1:
        raise ValueError(f"{name} must be >= 1")
    return value


def resolve_config(cfg: SummarizerConfig | None = None) -> SummarizerConfig:
    """Return config with optional env overrides applied."""
    if cfg is None:
        cfg = SummarizerConfig()

    updates: dict[str, object] = {}

    provider = os.getenv("LOG_SUMMARIZER_PROVIDER")
    if provider:
        provider = provider.strip().lower()
        if provider not in _PROVIDERS:
            allowed = ", ".join(_PROVIDERS)
            raise ValueError(f"LOG_SUMMARIZER_PROVIDER must be one of: {allowed}")
        updates["provider"] = provider

    model = os.getenv("LOG_SUMMARIZER_MODEL")
    if model:
        updates["model"] = model
    elif "provider" in updates and cfg.model == DEFAULT_MODELS[cfg.provider]:
        updates["model"] = DEFAULT_MODELS[str(updates["provider"])]

    base_url = os.getenv("OPENAI_BASE_URL")
    if base_url:
        updates["base_url"] = base_url

    logs_root = os.getenv("LOG_SUMMARIZER_LOGS_ROOT")
    if logs_root:
        updates["logs_root"] = logs_root

    chunk_size = _env_int("LOG_SUMMARIZER_CHUNK_SIZE")
    if chunk_size is not None:
        updates["max_chunk_size"] = chunk_size

    if not updates:
        return cfg
    return replace(cfg, **updates)
