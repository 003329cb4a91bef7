"""Line-aligned chunking of sanitized log text."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

DEFAULT_MAX_CHUNK_SIZE = 6000


@dataclass(frozen=True, slots=True)
class ChunkSequence:
    """Lazy, restartable sequence of chunks over one text.

    Every chunk except possibly the last ends just after a ``\\n`` when the
    window contains one past its first character; otherwise the window is cut
    at ``max_chunk_size`` characters, splitting an overlong line. Joining the
    chunks in order reproduces ``text`` exactly.
    """

    text: str
    max_chunk_size: int

    def __post_init__(self) -> None:
        if self.max_chunk_size <= 0:
            raise ValueError("max_chunk_size must be > 0")

    def __iter__(self) -> Iterator[str]:
        text = self.text
        size = len(text)
        pos = 0
        while pos < size:
            end = min(pos + self.max_chunk_size, size)
            if end < size:
                cut = text.rfind("\n", pos, end)
                if cut > pos:
                    end = cut + 1
            yield text[pos:end]
            pos = end


def chunk_text(text: str, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> ChunkSequence:
    """Split text into bounded, line-aligned chunks (empty text yields none)."""
    return ChunkSequence(text=text, max_chunk_size=max_chunk_size)
