"""Pipeline orchestration: read, sanitize, chunk, summarize, merge, persist.

``SummaryOrchestrator.run`` is an async generator. It yields one
:class:`ProgressReport` before each stage starts and finishes with a single
:class:`RunCompleted` carrying the report. Failures propagate as exceptions;
cancellation raises :class:`RunCancelledError`.

Stage indices are fixed regardless of chunk count::

    0 reading, 1 sanitizing, 2 chunking, 3 summarizing (once per chunk),
    4 merging, 5 complete
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Awaitable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from .ai.provider import ProviderPort, build_provider
from .ai.summarizer import AiSummarizer
from .chunker import DEFAULT_MAX_CHUNK_SIZE, chunk_text
from .config import SummarizerConfig
from .errors import LogsNotFoundError, RunCancelledError
from .log_reader import FileSystemLogReader, validate_date_key
from .models import AnalysisResult, PartialSummary, ProgressReport, RunCompleted, RunEvent
from .persistence import SummaryStore
from .sanitizer import sanitize

logger = logging.getLogger(__name__)

T = TypeVar("T")

TOTAL_STAGES = 5

STAGE_READING = 0
STAGE_SANITIZING = 1
STAGE_CHUNKING = 2
STAGE_SUMMARIZING = 3
STAGE_MERGING = 4
STAGE_COMPLETE = 5


@dataclass(slots=True)
class _RunState:
    """State owned by exactly one run; never shared across runs."""

    date: str
    root: Path
    partials: list[PartialSummary] = field(default_factory=list)


def _progress(index: int, stage: str) -> ProgressReport:
    return ProgressReport(index=index, total=TOTAL_STAGES, stage=stage)


def _check_cancelled(cancel_event: asyncio.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise RunCancelledError("Run cancelled")


async def _await_or_cancel(aw: Awaitable[T], cancel_event: asyncio.Event | None) -> T:
    """Await ``aw`` unless ``cancel_event`` fires first, in which case it is cancelled."""
    if cancel_event is None:
        return await aw

    if cancel_event.is_set():
        if asyncio.iscoroutine(aw):
            aw.close()
        raise RunCancelledError("Run cancelled")

    task = asyncio.ensure_future(aw)
    waiter = asyncio.ensure_future(cancel_event.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        waiter.cancel()

    if task.done():
        return task.result()

    task.cancel()
    await asyncio.gather(task, return_exceptions=True)
    raise RunCancelledError("Run cancelled")


def _validate_run_args(service_name: str, environment: str, date: str) -> str:
    if service_name is None or not service_name.strip():
        raise ValueError("service_name must not be blank")
    if environment is None or not environment.strip():
        raise ValueError("environment must not be blank")
    return validate_date_key(date)


class SummaryOrchestrator:
    """Sequences the analysis stages for one run at a time per call.

    The instance holds only collaborators; every call to :meth:`run` owns its
    own partial-summary buffer, so concurrent runs on one instance do not see
    each other's state.
    """

    def __init__(
        self,
        reader: FileSystemLogReader,
        summarizer: AiSummarizer,
        store: SummaryStore,
        *,
        default_root: str | Path = "logs",
        max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE,
    ) -> None:
        if max_chunk_size <= 0:
            raise ValueError("max_chunk_size must be > 0")
        self.reader = reader
        self.summarizer = summarizer
        self.store = store
        self.default_root = Path(default_root)
        self.max_chunk_size = max_chunk_size

    @classmethod
    def from_config(
        cls, cfg: SummarizerConfig, *, provider: ProviderPort | None = None
    ) -> SummaryOrchestrator:
        """Wire the default file-system collaborators around a provider."""
        provider = provider or build_provider(cfg)
        return cls(
            FileSystemLogReader(cfg.logs_root),
            AiSummarizer(provider, temperature=cfg.temperature),
            SummaryStore(cfg.logs_root),
            default_root=cfg.logs_root,
            max_chunk_size=cfg.max_chunk_size,
        )

    async def run(
        self,
        service_name: str,
        environment: str,
        date: str,
        logs_root: str | Path | None = None,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[RunEvent]:
        """Run the full pipeline, yielding progress and finally the result."""
        date = _validate_run_args(service_name, environment, date)
        state = _RunState(date=date, root=Path(logs_root) if logs_root is not None else self.default_root)

        sw = time.perf_counter()

        _check_cancelled(cancel_event)
        yield _progress(STAGE_READING, "Reading logs...")
        raw = await _await_or_cancel(self.reader.read_logs(state.date, state.root), cancel_event)
        if not raw or not raw.strip():
            logger.warning("No logs found for %s", state.date)
            raise LogsNotFoundError(state.date, str(state.root))
        logger.info("Read logs (%s chars) in %.0fms", len(raw), (time.perf_counter() - sw) * 1000)

        _check_cancelled(cancel_event)
        yield _progress(STAGE_SANITIZING, "Sanitizing sensitive data...")
        sw = time.perf_counter()
        sanitized = sanitize(raw)
        logger.info("Sanitized logs in %.0fms", (time.perf_counter() - sw) * 1000)

        _check_cancelled(cancel_event)
        yield _progress(STAGE_CHUNKING, "Chunking logs...")
        sw = time.perf_counter()
        chunks = [c for c in chunk_text(sanitized, self.max_chunk_size) if c.strip()]
        logger.info("Created %s chunks in %.0fms", len(chunks), (time.perf_counter() - sw) * 1000)

        header = self.summarizer.build_header(service_name, state.date, environment)

        for i, chunk in enumerate(chunks, start=1):
            _check_cancelled(cancel_event)
            yield _progress(STAGE_SUMMARIZING, f"Summarizing chunk {i}/{len(chunks)}...")
            sw = time.perf_counter()
            partial = await _await_or_cancel(
                self.summarizer.summarize_chunk(header, chunk), cancel_event
            )
            state.partials.append(partial)
            logger.info(
                "Summarized chunk %s/%s in %.0fms", i, len(chunks), (time.perf_counter() - sw) * 1000
            )

        _check_cancelled(cancel_event)
        yield _progress(STAGE_MERGING, "Merging summaries...")
        sw = time.perf_counter()
        result = await _await_or_cancel(self.summarizer.merge(header, state.partials), cancel_event)
        logger.info("Merged analysis in %.0fms", (time.perf_counter() - sw) * 1000)

        if result.date != state.date:
            if result.date:
                logger.warning(
                    "Merged report date %r differs from run date %s; using run date",
                    result.date,
                    state.date,
                )
            result = result.model_copy(update={"date": state.date})

        # The write is atomic and not interrupted once started.
        _check_cancelled(cancel_event)
        await self.store.save(result, state.date, state.root)

        yield RunCompleted(progress=_progress(STAGE_COMPLETE, "Complete"), result=result)

    async def load_summary(self, date: str, logs_root: str | Path | None = None) -> AnalysisResult | None:
        """Return the persisted report for a date, or None when none was saved."""
        root = Path(logs_root) if logs_root is not None else self.default_root
        return await self.store.load(date, root)
