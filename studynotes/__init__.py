"""Study Notes - turn PDF documents into structured markdown study notes.

Combines FastAPI for the HTTP API, Agno for LLM calls, SQLAlchemy for the
document database, NiceGUI for the web interface, and Pydantic for data
validation.

Components:
    - api: HTTP endpoints for documents and note generation
    - agent: LLM note-taking agent and its configuration
    - generation: chunking, batched generation and note assembly
    - parsing: PDF text extraction
    - db: document records and rate limit counters
    - storage: uploaded file storage
    - ui: web interface (dashboard, upload, notes viewer)
    - models: pipeline models and request/response schemas
"""

__version__ = "0.1.0"
