"""Chunk-level summarization and the final merge.

Turns sanitized log chunks into opaque partial summaries, then merges those
into one :class:`AnalysisResult`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence

from pydantic import ValidationError

from ..errors import MergePreconditionError, ProviderResponseError
from ..models import AnalysisResult, PartialSummary
from .prompt import SYSTEM_PROMPT, build_chunk_prompt, build_header, build_merge_prompt
from .provider import ChatRequest, ProviderPort

logger = logging.getLogger(__name__)


class AiSummarizer:
    """Both LLM-facing operations, sharing one provider and sampling setup."""

    def __init__(self, provider: ProviderPort, *, temperature: float = 0.3) -> None:
        self.provider = provider
        self.temperature = temperature

    @staticmethod
    def build_header(service_name: str, date: str, environment: str) -> str:
        return build_header(service_name, date, environment)

    async def summarize_chunk(
        self, header: str, chunk: str, *, model: str | None = None
    ) -> PartialSummary:
        """Summarize one chunk; the reply is only checked to be parseable JSON."""
        if not header or not header.strip():
            raise ValueError("header must not be blank")
        if not chunk or not chunk.strip():
            raise ValueError("chunk must not be blank")

        logger.debug("Summarizing chunk (%s chars)", len(chunk))
        reply = await self.provider.complete(
            ChatRequest(
                system=SYSTEM_PROMPT,
                user=build_chunk_prompt(header, chunk),
                temperature=self.temperature,
                model=model,
            )
        )

        try:
            json.loads(reply)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse chunk summary JSON: %s", e)
            raise ProviderResponseError(
                "Provider returned invalid JSON for chunk summary.",
                context={"stage": "chunk", "error": str(e)},
            ) from e

        return PartialSummary(payload=reply)

    async def merge(self, header: str, partials: Sequence[PartialSummary]) -> AnalysisResult:
        """Merge all partial summaries into the final report."""
        if not header or not header.strip():
            raise ValueError("header must not be blank")
        if not partials:
            raise MergePreconditionError("Cannot merge an empty list of partial summaries.")

        logger.debug("Merging %s partial summaries", len(partials))
        reply = await self.provider.complete(
            ChatRequest(
                system=SYSTEM_PROMPT,
                user=build_merge_prompt(header, partials),
                temperature=self.temperature,
            )
        )

        try:
            data = json.loads(reply)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse final analysis JSON: %s", e)
            raise ProviderResponseError(
                "Provider returned invalid JSON for final analysis.",
                context={"stage": "merge", "error": str(e)},
            ) from e

        if data is None:
            raise ProviderResponseError(
                "Provider returned no final analysis.", context={"stage": "merge"}
            )

        try:
            result = AnalysisResult.model_validate(data)
        except ValidationError as e:
            logger.error("Final analysis does not fit the report shape: %s", e)
            raise ProviderResponseError(
                "Provider returned a final analysis that does not fit the report shape.",
                context={"stage": "merge", "error": str(e)},
            ) from e

        logger.info("Successfully merged analysis for %s", result.date or "<no date>")
        return result
