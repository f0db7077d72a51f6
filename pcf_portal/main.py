"""
Main FastAPI application entry point.

Following kkb_fastapi pattern.
"""
import logging
import os

import uvicorn

from pcf_portal.core.config import get_environment_config_file
from pcf_portal.create_app import get_app

app = get_app(get_environment_config_file())


if __name__ == "__main__":
    try:
        uvicorn.run(
            app,
            host="0.0.0.0",
            port=int(os.environ.get("PORT", 8080)),
            log_level="debug",
            loop="asyncio",
        )
    except Exception as e:
        logging.error(f"Error running FastAPI: {e}")
