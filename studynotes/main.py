"""Main application entry point.

Runs the FastAPI app with the NiceGUI pages mounted on it.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def run_integrated() -> None:
    """Serve the API and the NiceGUI pages from one uvicorn server."""
    import uvicorn
    from nicegui import ui

    from studynotes.api.app import create_app
    from studynotes.ui import notes_page  # noqa: F401 - Registers the pages

    app = create_app()

    ui.run_with(
        app,
        title="Study Notes",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "studynotes-secret"),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting integrated server on http://localhost:{port}")
    logger.info(f"API docs available at http://localhost:{port}/docs")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def main() -> None:
    """Console entry point (`studynotes`)."""
    run_integrated()


if __name__ == "__main__":
    main()
