# changelog_scribe/__main__.py
"""
Entry point for the changelog-scribe HTTP server.

Logging is configured before the app is built so that config loading and
lifecycle construction are logged in the same JSON format as requests.
"""

import logging

import uvicorn

from changelog_scribe.config.loader import load_config
from changelog_scribe.logging_config import configure_logging
from changelog_scribe.server import create_app

logger = logging.getLogger(__name__)


def main(host: str | None = None, port: int | None = None) -> None:
    """
    Load config, build the app and serve it until interrupted.

    Args:
        host: Bind address override (defaults to server.host)
        port: Listen port override (defaults to server.port, or PORT env)
    """
    configure_logging()

    config = load_config()
    app = create_app(config)

    bind_host = host or config.server.host
    bind_port = port or config.server.port
    logger.info(f"Starting HTTP server on {bind_host}:{bind_port}")

    # log_config=None keeps uvicorn on the handlers configure_logging installed
    uvicorn.run(app, host=bind_host, port=bind_port, log_config=None)


if __name__ == "__main__":
    main()
