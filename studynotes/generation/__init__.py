"""Note generation from extracted document text.

Stages:
    - chunker: greedy paragraph/sentence splitting into bounded chunks
    - scheduler: batch-synchronous concurrent processing with progress
    - assembler: ordered concatenation with a table of contents
    - pipeline: the end-to-end flow for a stored document
"""

from studynotes.generation.assembler import assemble_notes, build_table_of_contents
from studynotes.generation.chunker import chunk_text
from studynotes.generation.pipeline import (
    EmptyDocumentError,
    NoteGenerator,
    generate_document_notes,
)
from studynotes.generation.scheduler import run_all

__all__ = [
    "EmptyDocumentError",
    "NoteGenerator",
    "assemble_notes",
    "build_table_of_contents",
    "chunk_text",
    "generate_document_notes",
    "run_all",
]
