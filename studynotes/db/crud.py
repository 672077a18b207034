"""CRUD operations for documents and rate limit counters.

Methods flush but never commit; the caller owns the transaction.
"""

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.db.models import DocumentModel, GenerationStatus, RateLimitModel


class DocumentCRUD:
    """Document record operations, always scoped to the owning user where a
    user is involved."""

    async def create(self, session: AsyncSession, **kwargs) -> DocumentModel:
        """Insert a document and return it with generated id and timestamps."""
        document = DocumentModel(**kwargs)
        session.add(document)
        await session.flush()
        await session.refresh(document)
        return document

    async def get_by_id(self, session: AsyncSession, document_id: str) -> DocumentModel | None:
        stmt = select(DocumentModel).where(DocumentModel.id == document_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_user(
        self,
        session: AsyncSession,
        document_id: str,
        user_id: str,
    ) -> DocumentModel | None:
        """Return the document if it exists and belongs to ``user_id``."""
        stmt = select(DocumentModel).where(
            DocumentModel.id == document_id,
            DocumentModel.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """Return the user's documents, newest first."""
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.user_id == user_id)
            .order_by(DocumentModel.created_at.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def update_fields(
        self,
        session: AsyncSession,
        document_id: str,
        **kwargs,
    ) -> DocumentModel | None:
        """Update columns of one document.

        Returns:
            The updated document, or None if it does not exist.
        """
        stmt = update(DocumentModel).where(DocumentModel.id == document_id).values(**kwargs)
        await session.execute(stmt)
        await session.flush()
        return await self.get_by_id(session, document_id)

    async def delete(self, session: AsyncSession, document_id: str, user_id: str) -> bool:
        """Delete the user's document. Returns False if nothing was deleted."""
        stmt = delete(DocumentModel).where(
            DocumentModel.id == document_id,
            DocumentModel.user_id == user_id,
        )
        result = await session.execute(stmt)
        await session.flush()
        return result.rowcount > 0

    async def set_status(
        self,
        session: AsyncSession,
        document_id: str,
        status: GenerationStatus,
        progress: int | None = None,
    ) -> DocumentModel | None:
        values: dict = {"generation_status": status}
        if progress is not None:
            values["generation_progress"] = progress
        return await self.update_fields(session, document_id, **values)

    async def set_progress(
        self,
        session: AsyncSession,
        document_id: str,
        progress: int,
    ) -> DocumentModel | None:
        """Raise the stored progress to ``progress``; never lowers it."""
        stmt = (
            update(DocumentModel)
            .where(
                DocumentModel.id == document_id,
                DocumentModel.generation_progress <= progress,
            )
            .values(generation_progress=progress)
        )
        await session.execute(stmt)
        await session.flush()
        return await self.get_by_id(session, document_id)

    async def claim_for_generation(
        self,
        session: AsyncSession,
        document_id: str,
        user_id: str,
    ) -> bool:
        """Move the user's document to in_progress unless a run already owns it.

        A single conditional update, so concurrent callers cannot both win.

        Returns:
            True if this caller claimed the document.
        """
        stmt = (
            update(DocumentModel)
            .where(
                DocumentModel.id == document_id,
                DocumentModel.user_id == user_id,
                DocumentModel.generation_status != GenerationStatus.IN_PROGRESS,
            )
            .values(generation_status=GenerationStatus.IN_PROGRESS, generation_progress=0)
        )
        result = await session.execute(stmt)
        await session.flush()
        return result.rowcount > 0

    async def mark_completed(
        self,
        session: AsyncSession,
        document_id: str,
        notes: str,
    ) -> DocumentModel | None:
        return await self.update_fields(
            session,
            document_id,
            notes=notes,
            generation_status=GenerationStatus.COMPLETED,
            generation_progress=100,
        )

    async def mark_failed(self, session: AsyncSession, document_id: str) -> DocumentModel | None:
        return await self.set_status(session, document_id, GenerationStatus.FAILED, progress=0)


def _dialect_insert(dialect_name: str):
    """Return the INSERT construct supporting ON CONFLICT for the dialect."""
    if dialect_name == "postgresql":
        return postgresql.insert
    if dialect_name == "sqlite":
        return sqlite.insert
    raise ValueError(f"Unsupported database dialect: {dialect_name}")


class RateLimitCRUD:
    """Fixed-window counters keyed by an arbitrary string (e.g. a user id)."""

    async def hit(
        self,
        session: AsyncSession,
        key: str,
        limit: int,
        window_seconds: int = 60,
        now: datetime | None = None,
    ) -> bool:
        """Count one request for ``key``.

        Returns:
            True if the request is within the limit, False if it must be
            rejected. Rejected requests are not counted.
        """
        now = now or datetime.now(timezone.utc)

        # Concurrent first hits must not collide on the primary key
        insert = _dialect_insert(session.get_bind().dialect.name)
        await session.execute(
            insert(RateLimitModel)
            .values(key=key, window_start=now, count=0)
            .on_conflict_do_nothing(index_elements=["key"])
        )

        stmt = select(RateLimitModel).where(RateLimitModel.key == key).with_for_update()
        result = await session.execute(stmt)
        counter = result.scalar_one()

        window_start = counter.window_start
        if window_start.tzinfo is None:
            # SQLite drops tzinfo on read
            window_start = window_start.replace(tzinfo=timezone.utc)

        if now - window_start > timedelta(seconds=window_seconds):
            counter.window_start = now
            counter.count = 1
            await session.flush()
            return True

        if counter.count >= limit:
            return False

        counter.count += 1
        await session.flush()
        return True


document_crud = DocumentCRUD()
rate_limit_crud = RateLimitCRUD()
