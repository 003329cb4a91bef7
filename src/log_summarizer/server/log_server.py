"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: run the daily summary pipeline, or load a persisted report
- Resources: persisted reports addressable by date

Run locally (stdio):
    python -m log_summarizer.server.log_server
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import Context, FastMCP

from log_summarizer.core.config import resolve_config
from log_summarizer.core.models import ProgressReport
from log_summarizer.core.persistence import SummaryStore
from log_summarizer.tools.summarize import load_summary_impl, summarize_logs_impl

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure a reasonable default logging setup.

    The MCP client typically captures stderr; keeping logs concise makes them easier to consume.
    """
    level_name = os.getenv("LOG_SUMMARIZER_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("log-summarizer", json_response=True)


@mcp.tool()
async def summarize_logs(
    service_name: str,
    environment: str,
    date: str,
    ctx: Context,
    logs_root: str | None = None,
) -> dict[str, Any]:
    """Summarize one day of logs into an incident report.

    Parameters
    ----------
    service_name:
        Service the logs belong to (used as prompt context).
    environment:
        Deployment environment, e.g. production or staging.
    date:
        YYYY-MM-DD; logs are read from <logs_root>/<date>/*.log.
    logs_root:
        Optional override of the configured logs root.

    Returns
    -------
    dict:
        {"source": "provider" | "cache", "summary": {...}}. When no API key
        is configured the persisted report for the date is returned instead.
    """

    async def on_progress(progress: ProgressReport) -> None:
        await ctx.report_progress(progress.index, progress.total, message=progress.stage)

    return await summarize_logs_impl(
        service_name=service_name,
        environment=environment,
        date=date,
        logs_root=logs_root,
        on_progress=on_progress,
    )


@mcp.tool()
async def load_summary(date: str, logs_root: str | None = None) -> dict[str, Any]:
    """Return the persisted report for a date without calling the provider."""
    return await load_summary_impl(date=date, logs_root=logs_root)


@mcp.resource("summary://{date}", mime_type="application/json")
async def summary_resource(date: str) -> str:
    """Persisted report for a date, as JSON."""
    cfg = resolve_config()
    result = await SummaryStore(cfg.logs_root).load(date)
    if result is None:
        return json.dumps({"error": f"No cached summary for {date}."})
    return result.to_json()


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
