"""In-memory models passed between the note generation stages."""

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """A bounded slice of source text.

    Attributes:
        text: The chunk content.
        sequence_index: 1-based position of the chunk in the source text.
    """

    text: str
    sequence_index: int = Field(ge=1)


class ProcessedChunk(BaseModel):
    """Notes generated for one chunk.

    Attributes:
        notes: Markdown notes (or a failure placeholder).
        sequence_index: Position of the originating chunk.
    """

    notes: str
    sequence_index: int = Field(ge=1)
