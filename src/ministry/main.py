"""Application entry point for the ministry LMS backend server."""

import structlog

from ministry.app import App
from ministry.config import Config
from ministry.logging import setup_logging
from ministry.web.runner import run_server

logger = structlog.get_logger(__name__)


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    logger.info("server_starting", host=config.host, port=config.port, debug=config.debug)
    # Services (including the session sweep) start and stop with the server lifespan
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
