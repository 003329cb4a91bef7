"""Provider Port: the one capability the pipeline needs from a language model.

Adapters turn a :class:`ChatRequest` into a single JSON-mode chat call and
return the raw text of the reply. Credential lookup happens at call time so a
missing key surfaces as :class:`ProviderConfigError` before any network I/O.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from openai import APIError, APIStatusError, AsyncOpenAI

from ..config import SummarizerConfig
from ..errors import ProviderConfigError, ProviderResponseError, ProviderTransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChatRequest:
    system: str
    user: str
    temperature: float = 0.3
    json_only: bool = True
    model: str | None = None  # per-call override


@runtime_checkable
class ProviderPort(Protocol):
    async def complete(self, request: ChatRequest) -> str:
        """Submit a structured prompt and return the reply text."""
        ...


def _missing_key_error(cfg: SummarizerConfig) -> ProviderConfigError:
    names = " or ".join(cfg.credential_env_names())
    return ProviderConfigError(
        f"No API key configured for provider '{cfg.provider}'. Set it in config or via {names}.",
        context={"provider": cfg.provider},
    )


class OpenAIChatProvider:
    """OpenAI-compatible ``/chat/completions`` adapter."""

    def __init__(self, cfg: SummarizerConfig, *, client: AsyncOpenAI | None = None) -> None:
        self.cfg = cfg
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            api_key = self.cfg.resolve_api_key()
            if api_key is None:
                raise _missing_key_error(self.cfg)
            # Failures are surfaced to the caller; no SDK-level retries.
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=self.cfg.base_url,
                timeout=self.cfg.request_timeout,
                max_retries=0,
            )
        return self._client

    async def complete(self, request: ChatRequest) -> str:
        client = self._get_client()
        model = request.model or self.cfg.model

        kwargs: dict[str, object] = {}
        if request.json_only:
            kwargs["response_format"] = {"type": "json_object"}

        logger.debug("Sending chat completion request (model=%s)", model)
        try:
            resp = await client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": request.system},
                    {"role": "user", "content": request.user},
                ],
                temperature=request.temperature,
                **kwargs,
            )
        except APIStatusError as e:
            logger.error("Provider returned %s: %s", e.status_code, e.message)
            raise ProviderTransportError(
                f"Provider returned {e.status_code}: {e.message}", status_code=e.status_code
            ) from e
        except APIError as e:
            logger.error("Provider request failed: %s", e)
            raise ProviderTransportError(f"Provider request failed: {e}") from e

        content = resp.choices[0].message.content if resp.choices else None
        if not content or not content.strip():
            raise ProviderResponseError("Provider response did not contain any content.")

        logger.debug("Received chat completion response (%s chars)", len(content))
        return content


class GeminiProvider:
    """Google Gemini adapter (requires the ``gemini`` extra)."""

    def __init__(self, cfg: SummarizerConfig) -> None:
        self.cfg = cfg

    async def complete(self, request: ChatRequest) -> str:
        api_key = self.cfg.resolve_api_key()
        if api_key is None:
            raise _missing_key_error(self.cfg)

        try:
            from google import genai
            from google.genai import errors as genai_errors
        except ImportError as e:  # pragma: no cover
            raise ProviderConfigError(
                "google-genai is required for the gemini provider. Install with: pip install '.[gemini]'"
            ) from e

        client = genai.Client(api_key=api_key)
        config: dict[str, object] = {
            "system_instruction": request.system,
            "temperature": request.temperature,
        }
        if request.json_only:
            config["response_mime_type"] = "application/json"

        try:
            resp = await client.aio.models.generate_content(
                model=request.model or self.cfg.model,
                contents=request.user,
                config=config,
            )
        except genai_errors.APIError as e:
            logger.error("Gemini call failed (%s): %s", e.code, e.message)
            raise ProviderTransportError(f"Gemini call failed: {e}", status_code=e.code) from e

        if not resp.text or not resp.text.strip():
            raise ProviderResponseError("Gemini response did not contain any text.")
        return resp.text


def build_provider(cfg: SummarizerConfig) -> ProviderPort:
    """Return the adapter selected by ``cfg.provider``."""
    if cfg.provider == "gemini":
        return GeminiProvider(cfg)
    return OpenAIChatProvider(cfg)
