"""Daemon runner for the Kinobot HTTP command endpoint."""

import sys

import uvicorn

from kinobot.api.app import create_app
from kinobot.config import Config
from kinobot.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def start_daemon(config: Config):
    """Start the daemon.

    Args:
        config: Application configuration
    """
    setup_logging(config.logging)

    app = create_app(config)

    logger.info(
        "Starting daemon",
        host=config.api.host,
        port=config.api.port,
    )

    try:
        uvicorn.run(
            app,
            host=config.api.host,
            port=config.api.port,
            log_level=config.logging.level,
            access_log=False,  # RequestLoggingMiddleware logs command requests
        )
    except KeyboardInterrupt:
        logger.info("Daemon interrupted by user")
    except Exception as e:
        logger.exception("Daemon error", error=str(e))
        sys.exit(1)
    finally:
        logger.info("Daemon stopped")
