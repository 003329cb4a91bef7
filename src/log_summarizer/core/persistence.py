"""Date-keyed persistence of final reports (the offline fallback source)."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from .errors import PersistenceError
from .log_reader import TEXT_ENCODING, date_dir
from .models import AnalysisResult

logger = logging.getLogger(__name__)

SUMMARY_FILENAME = "summary.json"


class SummaryStore:
    """Reads and writes ``root/YYYY-MM-DD/summary.json``."""

    def __init__(self, default_root: str | Path = "logs") -> None:
        self.default_root = Path(default_root)

    def summary_path(self, date: str, root: str | Path | None = None) -> Path:
        return date_dir(root if root is not None else self.default_root, date) / SUMMARY_FILENAME

    async def save(self, result: AnalysisResult, date: str, root: str | Path | None = None) -> Path:
        """Write the report, replacing any previous one for the same date."""
        path = self.summary_path(date, root)
        # Unique per call so concurrent saves of one date never share a temp file.
        tmp = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")

        try:
            await aiofiles.os.makedirs(path.parent, exist_ok=True)
            async with aiofiles.open(tmp, "w", encoding=TEXT_ENCODING) as f:
                await f.write(result.to_json())
            await aiofiles.os.replace(tmp, path)
        except OSError as exc:
            raise PersistenceError(f"Failed to save summary to {path}: {exc}", path=str(path)) from exc
        finally:
            # Left behind only when the write or replace did not complete.
            if tmp.exists():
                tmp.unlink(missing_ok=True)

        logger.info("Saved summary to %s", path)
        return path

    async def load(self, date: str, root: str | Path | None = None) -> AnalysisResult | None:
        """Return the persisted report, or None when nothing was saved for the date."""
        path = self.summary_path(date, root)

        try:
            async with aiofiles.open(path, "rb") as f:
                raw = await f.read()
        except FileNotFoundError:
            logger.warning("Summary file not found: %s", path)
            return None
        except OSError as exc:
            raise PersistenceError(f"Failed to read summary {path}: {exc}", path=str(path)) from exc

        logger.info("Loading summary from %s", path)
        try:
            return AnalysisResult.model_validate_json(raw)
        except (ValidationError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Summary file {path} is not a valid report: {exc}", path=str(path)) from exc
