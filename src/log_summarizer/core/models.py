"""Core data models for log summarization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class _ReportModel(BaseModel):
    """Base for report models: camelCase on the wire, case-insensitive on input.

    Missing or null fields take their defaults.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _match_keys_case_insensitively(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        lookup: dict[str, str] = {}
        for name, field in cls.model_fields.items():
            alias = field.alias or name
            lookup[name.lower()] = alias
            lookup[alias.lower()] = alias

        out: dict[str, Any] = {}
        for key, value in data.items():
            # Explicit nulls fall back to the field default.
            if value is None:
                continue
            target = lookup.get(key.lower(), key) if isinstance(key, str) else key
            # Exact-case keys win over case-folded duplicates.
            if target in out and key != target:
                continue
            out[target] = value
        return out


class Kpis(_ReportModel):
    total_lines: int = 0
    error_count: int = 0
    warn_count: int = 0
    unique_error_types: int = 0


class TopEvent(_ReportModel):
    type: str = ""
    count: int = 0
    examples: list[str] = Field(default_factory=list)


class RootCause(_ReportModel):
    error_type: str = ""
    hypothesis: str = ""


class ActionItem(_ReportModel):
    priority: str = Field(default="", description="high, medium or low.")
    title: str = ""
    why: str = ""
    owner_hint: str = ""

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class AnalysisResult(_ReportModel):
    """Final structured report for one day of logs."""

    date: str = ""
    overview: str = ""
    kpis: Kpis = Field(default_factory=Kpis)
    top_events: list[TopEvent] = Field(default_factory=list)
    root_causes: list[RootCause] = Field(default_factory=list)
    actions: list[ActionItem] = Field(default_factory=list)

    def to_json(self) -> str:
        """Serialize with stable camelCase field names."""
        return self.model_dump_json(by_alias=True, indent=2)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


@dataclass(frozen=True, slots=True)
class PartialSummary:
    """Unvalidated per-chunk payload.

    Only checked to be parseable JSON; the merge step is the sole consumer that
    interprets its shape.
    """

    payload: str


@dataclass(frozen=True, slots=True)
class ProgressReport:
    """One pipeline step: zero-based stage index out of a fixed total."""

    index: int
    total: int
    stage: str


@dataclass(frozen=True, slots=True)
class RunCompleted:
    """Terminal event of a successful run."""

    progress: ProgressReport
    result: AnalysisResult


RunEvent = ProgressReport | RunCompleted
