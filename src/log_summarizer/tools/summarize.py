"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools and
the CLI. Keep this layer thin: validate inputs, translate them into core
calls, and return JSON-serializable data structures.

It also owns the offline fallback: when no provider credential is available
the persisted report for the date is served instead, and a missing report is
reported as :class:`SummaryCacheMissError`, distinct from the missing key.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from log_summarizer.core.ai.provider import ProviderPort
from log_summarizer.core.config import SummarizerConfig, resolve_config
from log_summarizer.core.errors import LogSummarizerError
from log_summarizer.core.models import AnalysisResult, ProgressReport, RunCompleted
from log_summarizer.core.orchestrator import SummaryOrchestrator
from log_summarizer.core.persistence import SummaryStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressReport], Awaitable[None]]


class SummaryCacheMissError(LogSummarizerError, LookupError):
    """No provider credential and no persisted report to fall back on."""


def _payload(source: str, result: AnalysisResult) -> dict[str, Any]:
    return {"source": source, "summary": result.to_dict()}


async def load_summary_impl(
    *,
    date: str,
    logs_root: str | None = None,
    cfg: SummarizerConfig | None = None,
) -> dict[str, Any]:
    """Implementation for the `load_summary` MCP tool."""
    cfg = resolve_config(cfg)
    result = await SummaryStore(cfg.logs_root).load(date, logs_root)
    if result is None:
        raise SummaryCacheMissError(
            f"No cached summary for {date}.",
            context={"date": date, "logs_root": logs_root or cfg.logs_root},
        )
    return _payload("cache", result)


async def summarize_logs_impl(
    *,
    service_name: str,
    environment: str,
    date: str,
    logs_root: str | None = None,
    cfg: SummarizerConfig | None = None,
    provider: ProviderPort | None = None,
    on_progress: ProgressCallback | None = None,
) -> dict[str, Any]:
    """Implementation for the `summarize_logs` MCP tool.

    Notes
    -----
    - With a credential (or an explicit provider), runs the full pipeline and
      returns ``{"source": "provider", ...}``.
    - Without one, serves the persisted report (``"source": "cache"``) or raises
      SummaryCacheMissError. No provider call is made on this path.
    """
    cfg = resolve_config(cfg)

    if provider is None and not cfg.has_credential():
        logger.warning(
            "No API key for provider '%s'; falling back to cached summary for %s",
            cfg.provider,
            date,
        )
        return await load_summary_impl(date=date, logs_root=logs_root, cfg=cfg)

    orchestrator = SummaryOrchestrator.from_config(cfg, provider=provider)
    result: AnalysisResult | None = None
    async for event in orchestrator.run(service_name, environment, date, logs_root):
        progress = event.progress if isinstance(event, RunCompleted) else event
        if on_progress is not None:
            await on_progress(progress)
        if isinstance(event, RunCompleted):
            result = event.result

    if result is None:  # pragma: no cover
        raise RuntimeError("Pipeline finished without a result.")
    return _payload("provider", result)
