"""
Process entry point: `linkup-server` or `python -m linkup.server`.
"""

import logging
import sys

import uvicorn

from linkup.config import settings

logger = logging.getLogger(__name__)


def run() -> None:
    try:
        uvicorn.run(
            "linkup.main:app",
            host="0.0.0.0",
            port=settings.port,
            log_level=settings.log_level.lower(),
            reload=settings.environment == "development" and settings.debug,
        )
    except Exception:
        # an exception escaping the server loop is fatal
        logger.exception("Uncaught exception, shutting down")
        sys.exit(1)


if __name__ == "__main__":
    run()
