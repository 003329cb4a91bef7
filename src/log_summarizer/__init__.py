"""Daily log summarization: redaction, chunking, LLM summaries and a merged report."""

from __future__ import annotations

__version__ = "0.1.0"
