"""Greedy text splitter for note generation.

Paragraphs are packed into chunks of at most ``max_chars`` characters.
Paragraphs that are too long on their own are split into sentences and
packed the same way.
"""

import re

from studynotes.models.notes import Chunk

DEFAULT_CHUNK_SIZE = 4000

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")


def _split_paragraphs(text: str) -> list[str]:
    return [p.strip() for p in _PARAGRAPH_BREAK.split(text) if p.strip()]


def _split_sentences(paragraph: str) -> list[str]:
    return [s for s in _SENTENCE_BREAK.split(paragraph) if s]


def _pack(
    pieces: list[str],
    separator: str,
    max_chars: int,
    buffer: str,
    out: list[str],
) -> str:
    """Greedily append pieces to ``buffer``, flushing full buffers to ``out``.

    Returns the unflushed remainder.
    """
    for piece in pieces:
        if not buffer:
            buffer = piece
        elif len(buffer) + len(separator) + len(piece) <= max_chars:
            buffer = f"{buffer}{separator}{piece}"
        else:
            out.append(buffer)
            buffer = piece
    return buffer


def chunk_text(text: str, max_chars: int = DEFAULT_CHUNK_SIZE) -> list[Chunk]:
    """Split text into chunks no longer than ``max_chars``.

    A single sentence longer than ``max_chars`` is emitted unchanged, so
    that one chunk may exceed the limit.

    Args:
        text: Extracted document text.
        max_chars: Maximum characters per chunk.

    Returns:
        Chunks in source order, numbered from 1.

    Raises:
        ValueError: If max_chars is not positive.
    """
    if max_chars <= 0:
        raise ValueError(f"max_chars must be positive, got {max_chars}")

    pieces: list[str] = []
    buffer = ""

    for paragraph in _split_paragraphs(text):
        if len(paragraph) <= max_chars:
            buffer = _pack([paragraph], "\n\n", max_chars, buffer, pieces)
            continue

        # Oversized paragraph: close the running chunk, then pack sentences.
        if buffer:
            pieces.append(buffer)
        buffer = _pack(_split_sentences(paragraph), " ", max_chars, "", pieces)

    if buffer:
        pieces.append(buffer)

    return [Chunk(text=piece, sequence_index=i) for i, piece in enumerate(pieces, start=1)]
