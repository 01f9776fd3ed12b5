"""Quick launcher for the MathML lint web service."""
from __future__ import annotations

import uvicorn

from app import create_app
from core.config import settings
from core.logger import init_logging, logger


def main() -> None:
    """Launch the FastAPI app with uvicorn."""
    init_logging()
    app = create_app()
    logger.info("Starting FastAPI server at http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
