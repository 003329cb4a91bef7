"""Core summarization pipeline."""

from __future__ import annotations

from .chunker import ChunkSequence, chunk_text
from .config import SummarizerConfig, resolve_config
from .models import (
    ActionItem,
    AnalysisResult,
    Kpis,
    PartialSummary,
    ProgressReport,
    RootCause,
    RunCompleted,
    RunEvent,
    TopEvent,
)
from .orchestrator import SummaryOrchestrator
from .persistence import SummaryStore
from .sanitizer import sanitize

__all__ = [
    "ActionItem",
    "AnalysisResult",
    "ChunkSequence",
    "Kpis",
    "PartialSummary",
    "ProgressReport",
    "RootCause",
    "RunCompleted",
    "RunEvent",
    "SummarizerConfig",
    "SummaryOrchestrator",
    "SummaryStore",
    "TopEvent",
    "chunk_text",
    "resolve_config",
    "sanitize",
]
