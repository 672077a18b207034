"""Document database access through SQLAlchemy's async engine.

Works with any hosted database SQLAlchemy supports; SQLite is the local
default.
"""

from studynotes.db.crud import DocumentCRUD, RateLimitCRUD, document_crud, rate_limit_crud
from studynotes.db.models import DocumentModel, GenerationStatus, RateLimitModel
from studynotes.db.session import (
    create_engine_from_url,
    create_session_factory,
    get_engine,
    get_session_factory,
    init_db,
)

__all__ = [
    "DocumentCRUD",
    "DocumentModel",
    "GenerationStatus",
    "RateLimitCRUD",
    "RateLimitModel",
    "create_engine_from_url",
    "create_session_factory",
    "document_crud",
    "get_engine",
    "get_session_factory",
    "init_db",
    "rate_limit_crud",
]
