from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from dataclasses import replace

from log_summarizer.core.config import resolve_config
from log_summarizer.core.errors import (
    LogSummarizerError,
    LogsNotFoundError,
    PersistenceError,
    ProviderConfigError,
    ProviderResponseError,
    ProviderTransportError,
)
from log_summarizer.core.models import ProgressReport
from log_summarizer.tools.summarize import (
    SummaryCacheMissError,
    load_summary_impl,
    summarize_logs_impl,
)


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.getenv("LOG_SUMMARIZER_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(exc: BaseException, code: int) -> None:
    """Report an error on stderr and exit; pipeline errors are written as JSON."""
    if isinstance(exc, LogSummarizerError):
        print(json.dumps(exc.to_dict()), file=sys.stderr)
    else:
        print(f"Error: {exc}", file=sys.stderr)
    raise SystemExit(code)


async def _print_progress(progress: ProgressReport) -> None:
    print(f"[{progress.index}/{progress.total}] {progress.stage}", file=sys.stderr)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="log-summarizer",
        description="Summarize a day of application logs into an incident report.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    sub = p.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run the pipeline (falls back to the cached report without an API key)")
    run.add_argument("--service", required=True, help="Service name used as prompt context")
    run.add_argument("--env", dest="environment", required=True, help="Environment, e.g. production")
    run.add_argument("--date", required=True, help="YYYY-MM-DD")
    run.add_argument("--logs-root", default=None, help="Override the logs root directory")
    run.add_argument("--chunk-size", type=int, default=None, help="Max characters per chunk")
    run.add_argument("--quiet", action="store_true", help="Do not print progress")

    show = sub.add_parser("show", help="Print the cached report for a date")
    show.add_argument("--date", required=True, help="YYYY-MM-DD")
    show.add_argument("--logs-root", default=None, help="Override the logs root directory")
    return p


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint."""
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        cfg = resolve_config()
        if args.command == "show":
            out = asyncio.run(load_summary_impl(date=args.date, logs_root=args.logs_root, cfg=cfg))
        else:
            if args.chunk_size is not None:
                if args.chunk_size <= 0:
                    raise ValueError("--chunk-size must be > 0")
                cfg = replace(cfg, max_chunk_size=args.chunk_size)
            out = asyncio.run(
                summarize_logs_impl(
                    service_name=args.service,
                    environment=args.environment,
                    date=args.date,
                    logs_root=args.logs_root,
                    cfg=cfg,
                    on_progress=None if args.quiet else _print_progress,
                )
            )
    except (asyncio.CancelledError, KeyboardInterrupt):
        print("Cancelled.", file=sys.stderr)
        raise SystemExit(130)
    except (LogsNotFoundError, SummaryCacheMissError, ValueError) as e:
        _fail(e, 2)
    except (ProviderConfigError, ProviderTransportError, ProviderResponseError, PersistenceError) as e:
        _fail(e, 1)

    if out["source"] == "cache":
        print(f"Serving cached report for {args.date}.", file=sys.stderr)
    print(json.dumps(out["summary"], indent=2))


if __name__ == "__main__":
    main()
