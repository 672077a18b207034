"""ORM models for documents and rate limit counters."""

from datetime import datetime

from sqlalchemy import DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from studynotes.db.base import Base, TimestampMixin, UUIDMixin
from studynotes.models.schemas import GenerationStatus


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """An uploaded PDF and its generated notes.

    Attributes:
        user_id: Owner identity from the auth provider.
        file_name: Original upload filename.
        storage_path: Location of the stored PDF.
        file_size: Size in bytes.
        page_count: Number of pages found at upload.
        notes: Generated markdown, None until completed.
        generation_status: Current GenerationStatus.
        generation_progress: Percentage 0-100.
    """

    __tablename__ = "documents"

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    storage_path: Mapped[str] = mapped_column(String(1024), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)
    page_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    generation_status: Mapped[GenerationStatus] = mapped_column(
        Enum(
            GenerationStatus,
            name="generation_status",
            values_callable=lambda e: [member.value for member in e],
        ),
        nullable=False,
        default=GenerationStatus.PENDING,
    )
    generation_progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return (
            f"<DocumentModel(id={self.id}, file_name={self.file_name}, "
            f"status={self.generation_status}, progress={self.generation_progress})>"
        )


class RateLimitModel(Base):
    """Fixed-window request counter shared by all application processes."""

    __tablename__ = "rate_limits"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    window_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
