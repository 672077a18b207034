"""FastAPI endpoints for the study notes service.

Endpoints:
    - GET /health: Service health status
    - POST /documents/upload: Upload a PDF and start note generation
    - GET /documents: List the caller's documents
    - GET /documents/{id}: Document with generated notes
    - GET /documents/{id}/progress: Generation status and percentage
    - POST /documents/{id}/notes: Regenerate notes
    - DELETE /documents/{id}: Delete a document
"""

from studynotes.api.app import app, create_app

__all__ = ["app", "create_app"]
