from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class GenerationStatus(str, Enum):
    """Note generation lifecycle.

    PENDING: Uploaded, generation not started
    IN_PROGRESS: Generation running; see generation_progress
    COMPLETED: Notes available
    FAILED: Generation aborted; progress reset to 0
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class DocumentSummary(BaseModel):
    """Document entry for the dashboard list (notes omitted).

    Attributes:
        id: Document identifier.
        file_name: Original uploaded filename.
        file_size: Size in bytes.
        page_count: Number of pages.
        generation_status: Current note generation status.
        generation_progress: Percentage 0-100.
        created_at: Upload time.
        updated_at: Last modification time.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    file_name: str
    file_size: int = Field(ge=0)
    page_count: int = Field(ge=0)
    generation_status: GenerationStatus
    generation_progress: int = Field(ge=0, le=100)
    created_at: datetime
    updated_at: datetime


class DocumentDetail(DocumentSummary):
    """Document with its generated notes."""

    notes: str | None = None


class DocumentList(BaseModel):
    """The caller's documents, newest first."""

    documents: list[DocumentSummary]
    total: int = Field(ge=0)


class GenerationProgress(BaseModel):
    """Polling response for note generation.

    Attributes:
        id: Document identifier.
        status: Current generation status.
        progress: Percentage 0-100.
    """

    id: str
    status: GenerationStatus
    progress: int = Field(ge=0, le=100)


class ErrorResponse(BaseModel):
    """Error payload returned with non-2xx responses."""

    detail: str
