"""Application entry point for HealthDesk backend server."""

import structlog

from healthdesk.app import App
from healthdesk.config import Config
from healthdesk.logging import setup_logging
from healthdesk.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    structlog.get_logger(__name__).info(
        "server_starting", host=config.host, port=config.port, session_backend=config.session_backend
    )
    run_server(App(config), config)


if __name__ == "__main__":
    main()
