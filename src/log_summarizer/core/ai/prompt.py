"""Prompt construction for chunk summaries and the final merge."""

from __future__ import annotations

from collections.abc import Sequence

from ..models import PartialSummary

SYSTEM_PROMPT = (
    "You are an SRE/DevOps analyst specializing in application logs.\n"
    "Your task is to identify incidents, patterns, likely root causes, and actionable "
    "recommendations.\n"
    "Always respond with a single valid JSON value matching the requested schema exactly.\n"
    "Be concise but thorough. Focus on actionable insights."
)

CHUNK_SCHEMA = """{
  "errors": [{"type": "", "count": 0, "sample": ""}],
  "warnings": [{"type": "", "count": 0}],
  "observations": [""]
}"""

FINAL_SCHEMA = """{
  "date": "YYYY-MM-DD",
  "overview": "...",
  "kpis": {
    "totalLines": 0,
    "errorCount": 0,
    "warnCount": 0,
    "uniqueErrorTypes": 0
  },
  "topEvents": [
    {"type": "", "count": 0, "examples": [""]}
  ],
  "rootCauses": [
    {"errorType": "", "hypothesis": ""}
  ],
  "actions": [
    {"priority": "high|medium|low", "title": "", "why": "", "ownerHint": ""}
  ]
}"""


def build_header(service_name: str, date: str, environment: str) -> str:
    """Build the context header shared by every request of a run."""
    for name, value in (("service_name", service_name), ("date", date), ("environment", environment)):
        if value is None or not value.strip():
            raise ValueError(f"{name} must not be blank")
    return f"Service: {service_name}\nDate: {date}\nEnvironment: {environment}"


def build_chunk_prompt(header: str, chunk: str) -> str:
    return (
        f"{header}\n\n"
        "Analyze this log chunk and extract key information.\n"
        "Return JSON matching this schema:\n"
        f"{CHUNK_SCHEMA}\n\n"
        "Log chunk:\n"
        f"{chunk}\n"
    )


def build_merge_prompt(header: str, partials: Sequence[PartialSummary]) -> str:
    lines = [
        header,
        "",
        "Merge the following partial analyses into a comprehensive final report.",
        "Return JSON matching this schema exactly:",
        FINAL_SCHEMA,
        "",
        "Partial summaries:",
    ]
    for i, partial in enumerate(partials, start=1):
        lines.append(f"--- Chunk {i} ---")
        lines.append(partial.payload)
        lines.append("")
    return "\n".join(lines) + "\n"
