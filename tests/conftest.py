"""Pytest fixtures and shared test configuration.

Fixtures:
    - make_pdf: builds small text PDFs in memory
    - session_factory: async sessions on a temporary SQLite database
    - storage: file storage in a temporary directory
    - note_generator: NoteGenerator backed by a fake section processor
    - test_app / async_client: FastAPI app with overridden dependencies
"""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studynotes.api.app import create_app
from studynotes.api.dependencies import (
    get_config,
    get_db_session_factory,
    get_note_generator,
    get_storage,
)
from studynotes.config import AppConfig
from studynotes.db.session import create_engine_from_url, create_session_factory, init_db
from studynotes.generation.pipeline import NoteGenerator
from studynotes.models.notes import Chunk, ProcessedChunk
from studynotes.storage.local_file_storage import LocalFileStorage

TEST_USER_ID = "test-user-12345"


def build_pdf(pages: list[str]) -> bytes:
    """Build a minimal PDF with one text page per entry.

    Lines within a page are separated by newlines. Offsets in the xref
    table are computed exactly so pypdf parses the file without repair.
    """
    objects: list[bytes] = []
    kids = " ".join(f"{4 + 2 * i} 0 R" for i in range(len(pages)))
    objects.append(b"<< /Type /Catalog /Pages 2 0 R >>")
    objects.append(f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>".encode())
    objects.append(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")

    for i, page_text in enumerate(pages):
        content_id = 5 + 2 * i
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {content_id} 0 R >>"
            ).encode()
        )
        ops = ["BT", "/F1 12 Tf", "14 TL", "72 720 Td"]
        for line in page_text.split("\n"):
            escaped = line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
            ops.append(f"({escaped}) Tj")
            ops.append("T*")
        ops.append("ET")
        stream = "\n".join(ops).encode("latin-1")
        objects.append(b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream")

    out = bytearray(b"%PDF-1.4\n")
    offsets: list[int] = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode()
    return bytes(out)


async def fake_section_notes(chunk: Chunk, total_chunks: int) -> ProcessedChunk:
    """Stand-in for the LLM: one heading per section."""
    return ProcessedChunk(
        notes=f"# Section {chunk.sequence_index} of {total_chunks}\n\n- {len(chunk.text)} chars",
        sequence_index=chunk.sequence_index,
    )


@pytest.fixture
def make_pdf() -> Callable[[list[str]], bytes]:
    """Return the in-memory PDF builder."""
    return build_pdf


@pytest.fixture
def sample_pdf() -> bytes:
    """Two-page PDF with readable text."""
    return build_pdf(
        [
            "Photosynthesis converts light energy into chemical energy.\n"
            "It takes place in the chloroplasts.",
            "Cellular respiration releases energy stored in glucose.",
        ]
    )


@pytest.fixture
async def session_factory(tmp_path: Path) -> AsyncGenerator[async_sessionmaker[AsyncSession]]:
    """Create a fresh SQLite database with all tables.

    Yields:
        Session factory bound to the temporary database.
    """
    engine = create_engine_from_url(f"sqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def storage(tmp_path: Path) -> LocalFileStorage:
    return LocalFileStorage(str(tmp_path / "uploads"))


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        database_url=f"sqlite:///{tmp_path / 'unused.db'}",
        upload_dir=str(tmp_path / "uploads"),
        max_upload_size=10 * 1024 * 1024,
        rate_limit_per_minute=100,
        cors_origins=["*"],
    )


@pytest.fixture
def note_generator() -> NoteGenerator:
    return NoteGenerator(fake_section_notes, chunk_size=4000, max_concurrency=3)


@pytest.fixture
def test_app(
    session_factory: async_sessionmaker[AsyncSession],
    storage: LocalFileStorage,
    app_config: AppConfig,
    note_generator: NoteGenerator,
) -> FastAPI:
    """FastAPI app wired to the temporary database, storage and fake LLM."""
    application = create_app()
    application.dependency_overrides[get_db_session_factory] = lambda: session_factory
    application.dependency_overrides[get_storage] = lambda: storage
    application.dependency_overrides[get_config] = lambda: app_config
    application.dependency_overrides[get_note_generator] = lambda: note_generator
    return application


@pytest.fixture
async def async_client(test_app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        AsyncClient sending requests as TEST_USER_ID.
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-User-ID": TEST_USER_ID},
    ) as client:
        yield client
