"""Pydantic models for the generation pipeline and the HTTP API.

Models:
    - Chunk / ProcessedChunk: in-memory pipeline stages
    - DocumentSummary / DocumentDetail / DocumentList: document responses
    - GenerationProgress: status polling response
"""

from studynotes.models.notes import Chunk, ProcessedChunk
from studynotes.models.schemas import (
    DocumentDetail,
    DocumentList,
    DocumentSummary,
    ErrorResponse,
    GenerationProgress,
    GenerationStatus,
)

__all__ = [
    "Chunk",
    "DocumentDetail",
    "DocumentList",
    "DocumentSummary",
    "ErrorResponse",
    "GenerationProgress",
    "GenerationStatus",
    "ProcessedChunk",
]
