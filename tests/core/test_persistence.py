from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from log_summarizer.core.errors import PersistenceError
from log_summarizer.core.models import AnalysisResult
from log_summarizer.core.persistence import SUMMARY_FILENAME, SummaryStore


@pytest.mark.asyncio
async def test_save_then_load_round_trips(tmp_path: Path, final_report: dict) -> None:
    store = SummaryStore(tmp_path)
    result = AnalysisResult.model_validate(final_report)

    path = await store.save(result, "2025-10-01")
    loaded = await store.load("2025-10-01")

    assert path == tmp_path / "2025-10-01" / SUMMARY_FILENAME
    assert loaded == result


@pytest.mark.asyncio
async def test_save_writes_camel_case_keys(tmp_path: Path, final_report: dict) -> None:
    store = SummaryStore(tmp_path)
    await store.save(AnalysisResult.model_validate(final_report), "2025-10-01")

    data = json.loads((tmp_path / "2025-10-01" / SUMMARY_FILENAME).read_text(encoding="utf-8"))

    assert set(data) == {"date", "overview", "kpis", "topEvents", "rootCauses", "actions"}
    assert set(data["kpis"]) == {"totalLines", "errorCount", "warnCount", "uniqueErrorTypes"}
    assert data["actions"][0]["ownerHint"] == "platform"


@pytest.mark.asyncio
async def test_save_overwrites_previous_report(tmp_path: Path) -> None:
    store = SummaryStore(tmp_path)
    await store.save(AnalysisResult(date="2025-10-01", overview="first"), "2025-10-01")
    await store.save(AnalysisResult(date="2025-10-01", overview="second"), "2025-10-01")

    loaded = await store.load("2025-10-01")

    assert loaded is not None
    assert loaded.overview == "second"
    assert [p.name for p in (tmp_path / "2025-10-01").iterdir()] == [SUMMARY_FILENAME]


@pytest.mark.asyncio
async def test_load_missing_returns_none(tmp_path: Path) -> None:
    assert await SummaryStore(tmp_path).load("2025-12-31") is None


@pytest.mark.asyncio
async def test_load_tolerates_key_casing(tmp_path: Path) -> None:
    folder = tmp_path / "2025-10-01"
    folder.mkdir()
    (folder / SUMMARY_FILENAME).write_text(
        json.dumps(
            {
                "Date": "2025-10-01",
                "Overview": "ok",
                "KPIS": {"TotalLines": 10, "errorcount": 3},
                "TopEvents": [{"Type": "Timeout", "Count": 3, "Examples": ["x"]}],
                "ROOTCAUSES": [{"ErrorType": "Timeout", "Hypothesis": "slow db"}],
                "Actions": [{"Priority": "High", "Title": "t", "Why": "w", "OwnerHint": "db"}],
            }
        ),
        encoding="utf-8",
    )

    loaded = await SummaryStore(tmp_path).load("2025-10-01")

    assert loaded is not None
    assert loaded.kpis.total_lines == 10
    assert loaded.kpis.error_count == 3
    assert loaded.kpis.warn_count == 0
    assert loaded.top_events[0].type == "Timeout"
    assert loaded.root_causes[0].hypothesis == "slow db"
    assert loaded.actions[0].priority == "high"
    assert loaded.actions[0].owner_hint == "db"


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [b"{not json", b'{"date": "\xff\xfe"}'])
async def test_load_corrupt_file_raises(tmp_path: Path, content: bytes) -> None:
    folder = tmp_path / "2025-10-01"
    folder.mkdir()
    (folder / SUMMARY_FILENAME).write_bytes(content)

    with pytest.raises(PersistenceError):
        await SummaryStore(tmp_path).load("2025-10-01")


@pytest.mark.asyncio
async def test_save_failure_is_persistence_error(tmp_path: Path) -> None:
    # A regular file where the date directory should be.
    (tmp_path / "2025-10-01").write_text("blocker", encoding="utf-8")

    with pytest.raises(PersistenceError) as excinfo:
        await SummaryStore(tmp_path).save(AnalysisResult(date="2025-10-01"), "2025-10-01")

    assert isinstance(excinfo.value, OSError)


@pytest.mark.asyncio
async def test_concurrent_saves_leave_one_complete_report(tmp_path: Path) -> None:
    store = SummaryStore(tmp_path)
    reports = [AnalysisResult(date="2025-10-01", overview=f"run {i} " * 2000) for i in range(8)]

    await asyncio.gather(*(store.save(r, "2025-10-01") for r in reports))

    loaded = await store.load("2025-10-01")
    assert loaded in reports
    assert [p.name for p in (tmp_path / "2025-10-01").iterdir()] == [SUMMARY_FILENAME]
