"""Batch-synchronous dispatch of chunk processing.

Chunks are sent in fixed-size batches. A batch is awaited completely
before the next one starts, which caps the number of in-flight model
calls at ``concurrency``.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence

from studynotes.models.notes import Chunk, ProcessedChunk

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 3

ChunkProcessor = Callable[[Chunk], Awaitable[ProcessedChunk]]
ProgressCallback = Callable[[int], Awaitable[None] | None]


def progress_percent(done: int, total: int) -> int:
    """Return ``100 * done / total`` rounded half up."""
    return (200 * done + total) // (2 * total)


async def run_all(
    chunks: Sequence[Chunk],
    process: ChunkProcessor,
    concurrency: int = DEFAULT_CONCURRENCY,
    on_progress: ProgressCallback | None = None,
) -> list[ProcessedChunk]:
    """Process all chunks in batches of ``concurrency``.

    Args:
        chunks: Chunks to process.
        process: Coroutine function producing notes for one chunk.
        concurrency: Batch size (maximum simultaneous calls).
        on_progress: Called after every batch with the completed percentage.
            May be a plain function or a coroutine function.

    Returns:
        Processed chunks ordered by sequence_index.

    Raises:
        ValueError: If concurrency is not positive.
        Exception: Whatever ``process`` raises; the run is aborted.
    """
    if concurrency <= 0:
        raise ValueError(f"concurrency must be positive, got {concurrency}")

    total = len(chunks)
    results: list[ProcessedChunk] = []

    for start in range(0, total, concurrency):
        batch = chunks[start : start + concurrency]
        batch_results = await asyncio.gather(*(process(chunk) for chunk in batch))
        results.extend(batch_results)

        percent = progress_percent(len(results), total)
        logger.debug(f"Batch done: {len(results)}/{total} chunks ({percent}%)")

        if on_progress is not None:
            outcome = on_progress(percent)
            if inspect.isawaitable(outcome):
                await outcome

    return sorted(results, key=lambda processed: processed.sequence_index)
