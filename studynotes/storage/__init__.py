"""Storage for uploaded PDF files."""

from studynotes.storage.local_file_storage import LocalFileStorage, StoredFile, get_file_storage

__all__ = ["LocalFileStorage", "StoredFile", "get_file_storage"]
