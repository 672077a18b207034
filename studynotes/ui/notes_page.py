"""NiceGUI pages: document dashboard with upload, and the notes viewer."""

import os
from typing import Any

import httpx
from nicegui import app, events, ui

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

STATUS_LABELS = {
    "pending": "Waiting to start",
    "in_progress": "Generating notes",
    "completed": "Notes ready",
    "failed": "Generation failed",
}

STATUS_COLORS = {
    "pending": "grey",
    "in_progress": "primary",
    "completed": "positive",
    "failed": "negative",
}


def describe_status(status: str, progress: int) -> str:
    """Human-readable generation status, e.g. ``Generating notes (40%)``."""
    label = STATUS_LABELS.get(status, status)
    if status == "in_progress":
        return f"{label} ({progress}%)"
    return label


def format_size(size: int) -> str:
    if size >= 1024 * 1024:
        return f"{size / (1024 * 1024):.1f} MB"
    if size >= 1024:
        return f"{size / 1024:.0f} KB"
    return f"{size} B"


class NotesApiClient:
    """Thin async client for the documents API.

    Raises ``httpx.HTTPStatusError`` for error responses.
    """

    def __init__(
        self,
        user_id: str,
        base_url: str = API_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._user_id = user_id
        self._base_url = base_url
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={"X-User-ID": self._user_id},
            transport=self._transport,
            timeout=120.0,
        )

    async def list_documents(self) -> list[dict[str, Any]]:
        async with self._client() as client:
            response = await client.get("/documents")
            response.raise_for_status()
            return response.json()["documents"]

    async def get_document(self, document_id: str) -> dict[str, Any]:
        async with self._client() as client:
            response = await client.get(f"/documents/{document_id}")
            response.raise_for_status()
            return response.json()

    async def upload(self, filename: str, content: bytes) -> dict[str, Any]:
        async with self._client() as client:
            response = await client.post(
                "/documents/upload",
                files={"file": (filename, content, "application/pdf")},
            )
            response.raise_for_status()
            return response.json()

    async def regenerate(self, document_id: str) -> dict[str, Any]:
        async with self._client() as client:
            response = await client.post(f"/documents/{document_id}/notes")
            response.raise_for_status()
            return response.json()

    async def delete(self, document_id: str) -> None:
        async with self._client() as client:
            response = await client.delete(f"/documents/{document_id}")
            response.raise_for_status()


def _error_message(error: httpx.HTTPError) -> str:
    if isinstance(error, httpx.HTTPStatusError):
        try:
            return error.response.json().get("detail", str(error))
        except ValueError:
            return f"HTTP {error.response.status_code}"
    return f"Connection failed: {error}"


def _api_client() -> NotesApiClient:
    # The browser id stands in for the auth provider's user id
    return NotesApiClient(user_id=app.storage.browser["id"])


@ui.page("/")
def dashboard_page() -> None:
    """Document list with upload."""
    api = _api_client()

    async def refresh() -> None:
        try:
            documents = await api.list_documents()
        except httpx.HTTPError as e:
            ui.notify(_error_message(e), type="negative")
            return
        render_documents(documents)

    async def handle_upload(e: events.UploadEventArguments) -> None:
        try:
            await api.upload(e.file.name, await e.file.read())
        except httpx.HTTPError as err:
            ui.notify(_error_message(err), type="negative")
            return
        ui.notify(f"Uploaded {e.file.name}", type="positive")
        await refresh()

    async def delete_document(document: dict[str, Any]) -> None:
        try:
            await api.delete(document["id"])
        except httpx.HTTPError as e:
            ui.notify(_error_message(e), type="negative")
            return
        ui.notify(f"Deleted {document['file_name']}")
        await refresh()

    def render_documents(documents: list[dict[str, Any]]) -> None:
        documents_container.clear()
        with documents_container:
            if not documents:
                ui.label("No documents yet. Upload a PDF to get started.").classes(
                    "text-gray-400"
                )
                return
            for document in documents:
                status = document["generation_status"]
                with ui.card().classes("w-full"), ui.row().classes(
                    "w-full items-center justify-between"
                ):
                    with ui.column().classes("gap-0"):
                        ui.link(document["file_name"], f"/notes/{document['id']}").classes(
                            "text-base font-medium"
                        )
                        ui.label(
                            f"{document['page_count']} pages · {format_size(document['file_size'])}"
                        ).classes("text-xs text-gray-500")
                    with ui.row().classes("items-center gap-2"):
                        ui.badge(
                            describe_status(status, document["generation_progress"]),
                            color=STATUS_COLORS.get(status, "grey"),
                        )
                        ui.button(
                            icon="delete",
                            on_click=lambda d=document: delete_document(d),
                        ).props("flat round color=negative")

    with ui.column().classes("w-full max-w-3xl mx-auto p-6 gap-4"):
        ui.label("Study Notes").classes("text-2xl font-semibold")
        ui.upload(
            label="Upload a PDF (max 10MB)",
            on_upload=handle_upload,
            auto_upload=True,
        ).props("accept=.pdf").classes("w-full")
        documents_container = ui.column().classes("w-full gap-2")

    ui.timer(0.1, refresh, once=True)
    ui.timer(3.0, refresh)


@ui.page("/notes/{document_id}")
def notes_page(document_id: str) -> None:
    """Markdown notes viewer with live generation progress."""
    api = _api_client()

    async def refresh() -> None:
        try:
            document = await api.get_document(document_id)
        except httpx.HTTPError as e:
            ui.notify(_error_message(e), type="negative")
            return

        status = document["generation_status"]
        title.set_text(document["file_name"])
        status_label.set_text(describe_status(status, document["generation_progress"]))
        progress_bar.set_value(document["generation_progress"] / 100)
        progress_bar.set_visibility(status in ("pending", "in_progress"))
        notes_view.set_content(document["notes"] or "")

    async def regenerate() -> None:
        try:
            await api.regenerate(document_id)
        except httpx.HTTPError as e:
            ui.notify(_error_message(e), type="negative")
            return
        ui.notify("Note generation started")
        await refresh()

    with ui.column().classes("w-full max-w-4xl mx-auto p-6 gap-3"):
        with ui.row().classes("w-full items-center justify-between"):
            ui.link("← Dashboard", "/")
            ui.button("Regenerate", icon="refresh", on_click=regenerate).props("flat")
        title = ui.label().classes("text-2xl font-semibold")
        status_label = ui.label().classes("text-sm text-gray-500")
        progress_bar = ui.linear_progress(value=0, show_value=False)
        notes_view = ui.markdown().classes("w-full")

    ui.timer(0.1, refresh, once=True)
    ui.timer(3.0, refresh)

