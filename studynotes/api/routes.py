"""Document endpoints: upload, list, view, generate notes, delete.

Handles file validation, PDF parsing, storage, and scheduling of note
generation as a background task.
"""

import asyncio
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studynotes.api.dependencies import (
    get_config,
    get_db_session_factory,
    get_note_generator,
    get_session,
    get_storage,
    get_user_id,
)
from studynotes.config import AppConfig
from studynotes.db.crud import document_crud, rate_limit_crud
from studynotes.db.models import DocumentModel
from studynotes.generation.pipeline import NoteGenerator, generate_document_notes
from studynotes.models.schemas import (
    DocumentDetail,
    DocumentList,
    DocumentSummary,
    ErrorResponse,
    GenerationProgress,
    GenerationStatus,
)
from studynotes.parsing.pdf_parser import PDFParseError, parse_pdf
from studynotes.storage.local_file_storage import LocalFileStorage

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/documents",
    tags=["documents"],
    responses={
        status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)

ALLOWED_CONTENT_TYPES = {"application/pdf", "application/octet-stream"}


def _validate_file(file: UploadFile) -> str:
    """Validate filename and content type.

    Returns:
        The validated filename.

    Raises:
        HTTPException: 400 if the file is not a PDF.
    """
    filename = file.filename
    if not filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filename is required",
        )

    if not filename.lower().endswith(".pdf"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Only PDF files are allowed.",
        )

    if file.content_type and file.content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Only PDF files are allowed.",
        )

    return filename


async def _read_and_validate_size(file: UploadFile, max_size: int) -> bytes:
    """Read file content and validate size.

    Raises:
        HTTPException: 413 if file exceeds size limit.
    """
    content = await file.read()

    if len(content) > max_size:
        size_mb = len(content) / (1024 * 1024)
        limit_mb = max_size / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File size ({size_mb:.1f}MB) exceeds maximum allowed ({limit_mb:.0f}MB)",
        )

    return content


async def _check_rate_limit(
    session_factory: async_sessionmaker[AsyncSession],
    user_id: str,
    limit: int,
) -> None:
    """Count an upload attempt against the user's per-minute budget.

    Raises:
        HTTPException: 429 once the limit is reached.
    """
    async with session_factory() as session:
        allowed = await rate_limit_crud.hit(session, f"upload:{user_id}", limit)
        await session.commit()

    if not allowed:
        logger.warning(f"Upload rate limit reached for user {user_id}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests. Please try again later.",
        )


async def _get_owned_document(
    session: AsyncSession,
    document_id: str,
    user_id: str,
) -> DocumentModel:
    document = await document_crud.get_for_user(session, document_id, user_id)
    if document is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found",
        )
    return document


@router.post("/upload", response_model=DocumentDetail, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile,
    background_tasks: BackgroundTasks,
    generate: bool = True,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_db_session_factory),
    storage: LocalFileStorage = Depends(get_storage),
    config: AppConfig = Depends(get_config),
    generator: NoteGenerator = Depends(get_note_generator),
) -> DocumentDetail:
    """Upload a PDF and start note generation.

    Args:
        file: The uploaded PDF file (multipart/form-data).
        generate: Schedule note generation right away.

    Returns:
        The created document record.

    Raises:
        400: Invalid file (not PDF, empty, corrupt).
        401: Missing caller identity.
        413: File exceeds the size limit.
        429: Upload rate limit reached.
        500: Storage or database failure.
    """
    await _check_rate_limit(session_factory, user_id, config.rate_limit_per_minute)

    filename = _validate_file(file)
    content = await _read_and_validate_size(file, config.max_upload_size)

    try:
        pdf_content = await asyncio.to_thread(
            parse_pdf, content, max_size=config.max_upload_size
        )
    except PDFParseError as e:
        logger.warning(f"PDF parse error for {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    try:
        stored = await storage.store_pdf(content, user_id)
    except OSError as e:
        logger.error(f"Failed to store {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload file to storage",
        ) from e

    try:
        document = await document_crud.create(
            session,
            user_id=user_id,
            file_name=filename,
            storage_path=stored.stored_path,
            file_size=stored.file_size,
            page_count=pdf_content.pages,
            # A scheduled run owns the document from the start
            generation_status=(
                GenerationStatus.IN_PROGRESS if generate else GenerationStatus.PENDING
            ),
        )
        await session.commit()
    except Exception as e:
        logger.error(f"Failed to save document record for {filename}: {e}")
        await session.rollback()
        await storage.delete(stored.stored_path)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save file information",
        ) from e

    logger.info(f"Uploaded {filename} ({pdf_content.pages} pages) as document {document.id}")

    if generate:
        background_tasks.add_task(
            generate_document_notes, document.id, session_factory, storage, generator
        )

    return DocumentDetail.model_validate(document)


@router.get("", response_model=DocumentList)
async def list_documents(
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session),
) -> DocumentList:
    """List the caller's documents, newest first."""
    documents = await document_crud.list_for_user(session, user_id)
    return DocumentList(
        documents=[DocumentSummary.model_validate(d) for d in documents],
        total=len(documents),
    )


@router.get("/{document_id}", response_model=DocumentDetail)
async def get_document(
    document_id: str,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session),
) -> DocumentDetail:
    """Return one document with its notes."""
    document = await _get_owned_document(session, document_id, user_id)
    return DocumentDetail.model_validate(document)


@router.get("/{document_id}/progress", response_model=GenerationProgress)
async def get_generation_progress(
    document_id: str,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session),
) -> GenerationProgress:
    """Return the note generation status and percentage."""
    document = await _get_owned_document(session, document_id, user_id)
    return GenerationProgress(
        id=document.id,
        status=document.generation_status,
        progress=document.generation_progress,
    )


@router.post(
    "/{document_id}/notes",
    response_model=GenerationProgress,
    status_code=status.HTTP_202_ACCEPTED,
)
async def generate_notes(
    document_id: str,
    background_tasks: BackgroundTasks,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_db_session_factory),
    storage: LocalFileStorage = Depends(get_storage),
    generator: NoteGenerator = Depends(get_note_generator),
) -> GenerationProgress:
    """(Re)generate notes for a document.

    Raises:
        404: Unknown document.
        409: Generation already scheduled or running.
    """
    await _get_owned_document(session, document_id, user_id)

    claimed = await document_crud.claim_for_generation(session, document_id, user_id)
    await session.commit()

    if not claimed:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Notes are already being generated for this document",
        )

    background_tasks.add_task(
        generate_document_notes, document_id, session_factory, storage, generator
    )

    return GenerationProgress(id=document_id, status=GenerationStatus.IN_PROGRESS, progress=0)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: str,
    user_id: str = Depends(get_user_id),
    session: AsyncSession = Depends(get_session),
    storage: LocalFileStorage = Depends(get_storage),
) -> Response:
    """Delete a document and its stored file."""
    document = await _get_owned_document(session, document_id, user_id)

    try:
        await storage.delete(document.storage_path)
    except OSError as e:
        logger.error(f"Failed to delete stored file for document {document_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete file from storage",
        ) from e

    await document_crud.delete(session, document_id, user_id)
    await session.commit()

    logger.info(f"Deleted document {document_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
