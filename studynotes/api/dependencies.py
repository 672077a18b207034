"""FastAPI dependencies shared by the document routes.

Every dependency here can be replaced through ``app.dependency_overrides``.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import Depends, Header, HTTPException, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studynotes.config import AppConfig, get_app_config
from studynotes.db.session import get_session_factory
from studynotes.generation.pipeline import NoteGenerator
from studynotes.storage.local_file_storage import LocalFileStorage, get_file_storage

logger = logging.getLogger(__name__)


def get_config() -> AppConfig:
    return get_app_config()


def get_db_session_factory() -> async_sessionmaker[AsyncSession]:
    return get_session_factory()


async def get_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_db_session_factory),
) -> AsyncGenerator[AsyncSession]:
    """Yield a request-scoped session. Routes commit explicitly."""
    async with session_factory() as session:
        yield session


def get_storage() -> LocalFileStorage:
    return get_file_storage()


def get_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Return the caller identity forwarded by the auth provider.

    Raises:
        HTTPException: 401 if the X-User-ID header is missing or blank.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized - No valid session",
        )
    return x_user_id.strip()


def get_note_generator() -> NoteGenerator:
    """Build the note generator backed by the shared note agent.

    Raises:
        HTTPException: 503 if the model API is not configured.
    """
    from studynotes.agent.note_agent import get_note_agent_service

    try:
        service = get_note_agent_service()
    except ValidationError as e:
        logger.error(f"Note generation is not configured: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Note generation is not configured",
        ) from e

    return NoteGenerator(
        service.process,
        chunk_size=service.config.chunk_size,
        max_concurrency=service.config.max_concurrency,
    )
