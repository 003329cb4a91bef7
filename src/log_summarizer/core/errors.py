"""Error taxonomy for the summarization pipeline.

Each error derives from the builtin exception a caller would naturally catch
(``FileNotFoundError`` for missing logs, ``OSError`` for storage, ...) so the
distinct conditions stay distinguishable without forcing callers to import
this module.
"""

from __future__ import annotations

import asyncio
from typing import Any


class LogSummarizerError(Exception):
    """Mixin base for all pipeline errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert the error into a JSON-serializable dict."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "context": self.context,
        }


class LogsNotFoundError(LogSummarizerError, FileNotFoundError):
    """No log text exists for the requested date/root."""

    def __init__(self, date: str, root: str) -> None:
        super().__init__(f"No logs found for {date} under {root}", context={"date": date, "root": root})


class ProviderConfigError(LogSummarizerError, RuntimeError):
    """The summarization provider has no credential configured."""


class ProviderTransportError(LogSummarizerError, RuntimeError):
    """The provider returned a non-success response or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message, context={"status_code": status_code})
        self.status_code = status_code


class ProviderResponseError(LogSummarizerError, RuntimeError):
    """The provider answered, but not with the structured payload we asked for."""


class MergePreconditionError(LogSummarizerError, ValueError):
    """Merge was asked to combine zero partial summaries."""


class PersistenceError(LogSummarizerError, OSError):
    """Reading or writing the persisted report failed."""

    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(message, context={"path": path})
        self.path = path


class RunCancelledError(asyncio.CancelledError):
    """A run was cancelled by its caller; not a failure to report."""
