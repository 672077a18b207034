"""Unit tests for document CRUD and the rate limit counter."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
import pytest_check as check
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studynotes.db.crud import document_crud, rate_limit_crud
from studynotes.db.models import DocumentModel, GenerationStatus
from studynotes.db.session import create_engine_from_url, get_async_url


async def create_document(
    session: AsyncSession,
    user_id: str = "user-1",
    file_name: str = "biology.pdf",
    **kwargs,
) -> DocumentModel:
    document = await document_crud.create(
        session,
        user_id=user_id,
        file_name=file_name,
        storage_path=f"/tmp/{file_name}",
        file_size=1234,
        page_count=3,
        **kwargs,
    )
    await session.commit()
    return document


class TestDocumentCRUD:
    """Tests for document records."""

    async def test_create_sets_defaults(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        async with session_factory() as session:
            document = await create_document(session)

        check.equal(len(document.id), 36)
        check.equal(document.generation_status, GenerationStatus.PENDING)
        check.equal(document.generation_progress, 0)
        check.is_none(document.notes)
        check.is_not_none(document.created_at)

    async def test_get_for_user_enforces_ownership(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        async with session_factory() as session:
            document = await create_document(session, user_id="owner")
            owned = await document_crud.get_for_user(session, document.id, "owner")
            foreign = await document_crud.get_for_user(session, document.id, "intruder")

        check.equal(owned.id, document.id)
        check.is_none(foreign)

    async def test_list_for_user_newest_first(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        async with session_factory() as session:
            await create_document(session, file_name="old.pdf", created_at=base)
            await create_document(
                session, file_name="new.pdf", created_at=base + timedelta(hours=1)
            )
            await create_document(session, user_id="someone-else", file_name="other.pdf")
            documents = await document_crud.list_for_user(session, "user-1")

        assert [d.file_name for d in documents] == ["new.pdf", "old.pdf"]

    async def test_set_progress_never_lowers(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        async with session_factory() as session:
            document = await create_document(session)
            await document_crud.set_progress(session, document.id, 60)
            await document_crud.set_progress(session, document.id, 30)
            await session.commit()

        async with session_factory() as session:
            stored = await document_crud.get_by_id(session, document.id)

        assert stored.generation_progress == 60

    async def test_mark_completed_and_failed(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        async with session_factory() as session:
            document = await create_document(session)
            completed = await document_crud.mark_completed(session, document.id, "# Notes")
            check.equal(completed.generation_status, GenerationStatus.COMPLETED)
            check.equal(completed.generation_progress, 100)
            check.equal(completed.notes, "# Notes")

            failed = await document_crud.mark_failed(session, document.id)
            check.equal(failed.generation_status, GenerationStatus.FAILED)
            check.equal(failed.generation_progress, 0)

    async def test_update_missing_document_returns_none(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        async with session_factory() as session:
            result = await document_crud.set_status(
                session, "does-not-exist", GenerationStatus.IN_PROGRESS
            )

        assert result is None

    @pytest.mark.parametrize(
        "status",
        [GenerationStatus.PENDING, GenerationStatus.COMPLETED, GenerationStatus.FAILED],
    )
    async def test_claim_for_generation_from_idle_status(
        self, session_factory: async_sessionmaker[AsyncSession], status: GenerationStatus
    ) -> None:
        async with session_factory() as session:
            document = await create_document(
                session, generation_status=status, generation_progress=40
            )
            claimed = await document_crud.claim_for_generation(session, document.id, "user-1")
            await session.commit()

        async with session_factory() as session:
            stored = await document_crud.get_by_id(session, document.id)

        check.is_true(claimed)
        check.equal(stored.generation_status, GenerationStatus.IN_PROGRESS)
        check.equal(stored.generation_progress, 0)

    async def test_claim_for_generation_refuses_running_document(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        async with session_factory() as session:
            document = await create_document(
                session, generation_status=GenerationStatus.IN_PROGRESS, generation_progress=40
            )
            claimed = await document_crud.claim_for_generation(session, document.id, "user-1")
            await session.commit()
            stored = await document_crud.get_by_id(session, document.id)

        check.is_false(claimed)
        check.equal(stored.generation_progress, 40)

    async def test_claim_for_generation_scoped_to_user(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        async with session_factory() as session:
            document = await create_document(session, user_id="owner")

            assert not await document_crud.claim_for_generation(session, document.id, "intruder")

    async def test_delete_scoped_to_user(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        async with session_factory() as session:
            document = await create_document(session, user_id="owner")
            check.is_false(await document_crud.delete(session, document.id, "intruder"))
            check.is_true(await document_crud.delete(session, document.id, "owner"))
            await session.commit()
            check.is_none(await document_crud.get_by_id(session, document.id))


class TestRateLimitCRUD:
    """Tests for the fixed-window counter."""

    async def test_allows_up_to_limit_then_rejects(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        async with session_factory() as session:
            results = [
                await rate_limit_crud.hit(session, "upload:u1", 3, now=now + timedelta(seconds=i))
                for i in range(5)
            ]

        assert results == [True, True, True, False, False]

    async def test_window_resets_after_expiry(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        async with session_factory() as session:
            check.is_true(await rate_limit_crud.hit(session, "upload:u1", 1, now=now))
            check.is_false(
                await rate_limit_crud.hit(session, "upload:u1", 1, now=now + timedelta(seconds=30))
            )
            await session.commit()

        async with session_factory() as session:
            check.is_true(
                await rate_limit_crud.hit(session, "upload:u1", 1, now=now + timedelta(seconds=61))
            )

    async def test_keys_are_independent(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        async with session_factory() as session:
            check.is_true(await rate_limit_crud.hit(session, "upload:a", 1, now=now))
            check.is_true(await rate_limit_crud.hit(session, "upload:b", 1, now=now))
            check.is_false(await rate_limit_crud.hit(session, "upload:a", 1, now=now))

    async def test_concurrent_first_hits_share_one_counter(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        """Two sessions racing on a new key both get an answer, and only one passes."""
        now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

        async def hit() -> bool:
            async with session_factory() as session:
                allowed = await rate_limit_crud.hit(session, "upload:race", 1, now=now)
                await session.commit()
            return allowed

        results = await asyncio.gather(hit(), hit())

        assert sorted(results) == [False, True]


class TestAsyncUrl:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("sqlite:///data/notes.db", "sqlite+aiosqlite:///data/notes.db"),
            ("postgres://u:p@db/notes", "postgresql+asyncpg://u:p@db/notes"),
            ("postgresql://u:p@db/notes", "postgresql+asyncpg://u:p@db/notes"),
            ("postgresql+asyncpg://u:p@db/notes", "postgresql+asyncpg://u:p@db/notes"),
        ],
    )
    def test_converts_to_async_driver(self, url: str, expected: str) -> None:
        assert get_async_url(url) == expected

    async def test_engine_creates_sqlite_directory(self, tmp_path) -> None:
        db_path = tmp_path / "nested" / "dir" / "notes.db"
        engine = create_engine_from_url(f"sqlite:///{db_path}")
        await engine.dispose()

        assert db_path.parent.is_dir()
