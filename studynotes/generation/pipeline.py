"""Note generation pipeline: extract, chunk, generate, assemble, persist.

``NoteGenerator`` turns text into notes. ``generate_document_notes`` runs
it for one stored document and records status and progress in the
database.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studynotes.db.crud import document_crud
from studynotes.db.models import GenerationStatus
from studynotes.generation.assembler import assemble_notes
from studynotes.generation.chunker import DEFAULT_CHUNK_SIZE, chunk_text
from studynotes.generation.scheduler import DEFAULT_CONCURRENCY, ProgressCallback, run_all
from studynotes.models.notes import Chunk, ProcessedChunk
from studynotes.parsing.pdf_parser import parse_pdf
from studynotes.storage.local_file_storage import LocalFileStorage

logger = logging.getLogger(__name__)

SectionProcessor = Callable[[Chunk, int], Awaitable[ProcessedChunk]]


class EmptyDocumentError(Exception):
    """Raised when a document has no text to generate notes from."""

    pass


class NoteGenerator:
    """Generates assembled markdown notes from plain text.

    Args:
        process: Coroutine function ``(chunk, total_chunks) -> ProcessedChunk``,
            normally ``NoteAgentService.process``.
        chunk_size: Maximum characters per chunk.
        max_concurrency: Chunks processed per batch.
    """

    def __init__(
        self,
        process: SectionProcessor,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if max_concurrency <= 0:
            raise ValueError(f"max_concurrency must be positive, got {max_concurrency}")
        self._process = process
        self.chunk_size = chunk_size
        self.max_concurrency = max_concurrency

    async def generate(self, text: str, on_progress: ProgressCallback | None = None) -> str:
        """Generate notes for ``text``.

        Raises:
            EmptyDocumentError: If the text is blank.
        """
        chunks = chunk_text(text, self.chunk_size)
        if not chunks:
            raise EmptyDocumentError("Document contains no extractable text")

        total = len(chunks)
        logger.info(
            f"Generating notes: {total} chunks, {self.max_concurrency} concurrent requests"
        )

        async def process(chunk: Chunk) -> ProcessedChunk:
            return await self._process(chunk, total)

        processed = await run_all(chunks, process, self.max_concurrency, on_progress)
        return assemble_notes(processed)


async def generate_document_notes(
    document_id: str,
    session_factory: async_sessionmaker[AsyncSession],
    storage: LocalFileStorage,
    generator: NoteGenerator,
) -> bool:
    """Generate and persist notes for one document.

    Status moves to in_progress, then to completed with progress 100, or
    to failed with progress reset to 0. Exceptions are logged, not raised,
    since this runs as a background task.

    Returns:
        True if notes were stored.
    """
    async with session_factory() as session:
        document = await document_crud.set_status(
            session, document_id, GenerationStatus.IN_PROGRESS, progress=0
        )
        await session.commit()

    if document is None:
        logger.warning(f"Document {document_id} no longer exists, skipping generation")
        return False

    async def persist_progress(percent: int) -> None:
        # 100 is written only together with the completed status
        async with session_factory() as session:
            await document_crud.set_progress(session, document_id, min(percent, 99))
            await session.commit()

    try:
        file_content = await storage.read(document.storage_path)
        content = await asyncio.to_thread(parse_pdf, file_content)
        notes = await generator.generate(content.text, on_progress=persist_progress)

        async with session_factory() as session:
            await document_crud.mark_completed(session, document_id, notes)
            await session.commit()
    except Exception as e:
        logger.error(f"Note generation failed for document {document_id}: {e}")
        async with session_factory() as session:
            await document_crud.mark_failed(session, document_id)
            await session.commit()
        return False

    logger.info(f"Notes generated for document {document_id} ({len(notes)} chars)")
    return True
