"""Integration tests for the documents API.

Requests go through httpx ASGITransport into the FastAPI app, with a
temporary SQLite database, temporary file storage and a fake section
processor. Background note generation completes before the response
returns, so final document state can be asserted directly.
"""
