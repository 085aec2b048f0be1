"""
Entry point for the Book Service
"""

import logging

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from book_service.app import create_app  # noqa: E402
from book_service.config.settings import load_settings  # noqa: E402

logger = logging.getLogger(__name__)

settings = load_settings()
app = create_app(settings)

if __name__ == "__main__":
    logger.info(f"Starting Book Service on port {settings.port}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
