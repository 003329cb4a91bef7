"""Reads one day of raw logs from a ``root/YYYY-MM-DD/*.log`` layout."""

from __future__ import annotations

import logging
from datetime import date as date_type
from pathlib import Path

import aiofiles

logger = logging.getLogger(__name__)

LOG_SUFFIX = ".log"
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "replace"


def validate_date_key(date: str) -> str:
    """Return a stripped ``YYYY-MM-DD`` key or raise ValueError."""
    if date is None or not date.strip():
        raise ValueError("date must not be blank")
    key = date.strip()
    try:
        parsed = date_type.fromisoformat(key)
    except ValueError as exc:
        raise ValueError(f"date must look like YYYY-MM-DD (got {date!r})") from exc
    if parsed.isoformat() != key:
        raise ValueError(f"date must look like YYYY-MM-DD (got {date!r})")
    return key


def date_dir(root: str | Path, date: str) -> Path:
    return Path(root) / validate_date_key(date)


def list_log_files(folder: Path) -> list[Path]:
    """Return ``*.log`` files directly under folder, sorted by filename."""
    if not folder.is_dir():
        return []
    return sorted(
        (p for p in folder.iterdir() if p.suffix == LOG_SUFFIX and p.is_file()),
        key=lambda p: p.name,
    )


class FileSystemLogReader:
    """Concatenates every log file for a date; missing data reads as empty text."""

    def __init__(self, default_root: str | Path = "logs") -> None:
        self.default_root = Path(default_root)

    async def read_logs(self, date: str, root: str | Path | None = None) -> str:
        folder = date_dir(root if root is not None else self.default_root, date)

        if not folder.is_dir():
            logger.warning("Log directory does not exist: %s", folder)
            return ""

        files = list_log_files(folder)
        if not files:
            logger.warning("No log files found in: %s", folder)
            return ""

        logger.info("Reading %s log file(s) from %s", len(files), folder)

        parts: list[str] = []
        for path in files:
            async with aiofiles.open(path, encoding=TEXT_ENCODING, errors=TEXT_ERRORS) as f:
                parts.append(await f.read())
            parts.append("\n")

        text = "".join(parts)
        logger.info("Read %s characters from logs for %s", len(text), date)
        return text
