from __future__ import annotations

import pytest

from log_summarizer.core.chunker import ChunkSequence, chunk_text

TEXTS = [
    "line1\nline2\nline3\n",
    "no newline at all but fairly long text",
    "a\n\n\nb\nccccccccccccccccccccccc\nd",
    "\n\n\n\n",
    "x" * 50 + "\n" + "y" * 7,
]


def test_chunk_prefers_line_boundaries() -> None:
    chunks = list(chunk_text("line1\nline2\nline3\n", 12))
    assert chunks == ["line1\nline2\n", "line3\n"]


def test_chunk_empty_text_yields_no_chunks() -> None:
    assert list(chunk_text("", 10)) == []


@pytest.mark.parametrize("size", [0, -1])
def test_chunk_rejects_non_positive_size(size: int) -> None:
    with pytest.raises(ValueError, match="max_chunk_size"):
        chunk_text("abc", size)


def test_chunk_splits_overlong_line_at_hard_boundary() -> None:
    assert list(chunk_text("abcdefghij", 4)) == ["abcd", "efgh", "ij"]


def test_chunk_newline_at_window_start_uses_hard_boundary() -> None:
    # The only newline sits at the window start, so it cannot shrink the window.
    assert list(chunk_text("\nabcdef", 3)) == ["\nab", "cde", "f"]


@pytest.mark.parametrize("text", TEXTS)
@pytest.mark.parametrize("size", [1, 2, 3, 5, 12, 100])
def test_chunk_concatenation_reproduces_input(text: str, size: int) -> None:
    chunks = list(chunk_text(text, size))
    assert "".join(chunks) == text
    assert all(0 < len(c) <= size for c in chunks)


@pytest.mark.parametrize("text", TEXTS)
@pytest.mark.parametrize("size", [3, 5, 12])
def test_non_final_chunks_end_on_newline_when_window_has_one(text: str, size: int) -> None:
    chunks = list(chunk_text(text, size))
    pos = 0
    for chunk in chunks[:-1]:
        window = text[pos : pos + size]
        if "\n" in window[1:]:
            assert chunk.endswith("\n")
        pos += len(chunk)


def test_chunk_sequence_is_lazy_and_restartable() -> None:
    seq = chunk_text("a\nb\nc\n", 2)
    assert isinstance(seq, ChunkSequence)
    first = list(seq)
    second = list(seq)
    assert first == second == ["a\n", "b\n", "c\n"]
