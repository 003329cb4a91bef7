from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from log_summarizer.core.ai.provider import ChatRequest

FINAL_REPORT = {
    "date": "2025-10-01",
    "overview": "Checkout service saw a burst of upstream timeouts.",
    "kpis": {"totalLines": 4, "errorCount": 2, "warnCount": 1, "uniqueErrorTypes": 1},
    "topEvents": [
        {"type": "UpstreamTimeout", "count": 2, "examples": ["upstream timeout route=/api/v1/items"]}
    ],
    "rootCauses": [{"errorType": "UpstreamTimeout", "hypothesis": "Inventory API saturated."}],
    "actions": [
        {
            "priority": "high",
            "title": "Add timeout budget",
            "why": "Timeouts cascade into checkout failures.",
            "ownerHint": "platform",
        }
    ],
}

CHUNK_REPLY = json.dumps(
    {"errors": [{"type": "UpstreamTimeout", "count": 1, "sample": "timeout"}], "warnings": [], "observations": []}
)


class FakeProvider:
    """Deterministic Provider Port: records requests, replays canned replies."""

    def __init__(self, *, chunk_reply: str = CHUNK_REPLY, merge_reply: str | None = None) -> None:
        self.chunk_reply = chunk_reply
        self.merge_reply = merge_reply if merge_reply is not None else json.dumps(FINAL_REPORT)
        self.requests: list[ChatRequest] = []

    async def complete(self, request: ChatRequest) -> str:
        self.requests.append(request)
        if "Partial summaries:" in request.user:
            return self.merge_reply
        return self.chunk_reply


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def write_day_logs() -> Callable[[Path, str, dict[str, str]], Path]:
    def _write(root: Path, date: str, files: dict[str, str]) -> Path:
        folder = root / date
        folder.mkdir(parents=True, exist_ok=True)
        for name, content in files.items():
            (folder / name).write_text(content, encoding="utf-8")
        return folder

    return _write


@pytest.fixture
def write_log() -> Callable[[Path, str], Path]:
    def _write(root: Path, date: str) -> Path:
        folder = root / date
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / "app.log"
        path.write_text(
            "\n".join(
                [
                    f"{date}T08:12:01Z [INFO] service started",
                    f"{date}T08:12:03Z [WARNING] retrying request for ops@example.com",
                    f"{date}T08:12:04Z [ERROR] upstream timeout route=/api/v1/items from 10.0.0.5",
                    f"{date}T08:12:05Z [ERROR] auth failed with Bearer abc123==",
                ]
            )
            + "\n",
            encoding="utf-8",
        )
        return path

    return _write


@pytest.fixture
def make_provider() -> Callable[..., FakeProvider]:
    return FakeProvider


@pytest.fixture
def final_report() -> dict:
    return json.loads(json.dumps(FINAL_REPORT))
