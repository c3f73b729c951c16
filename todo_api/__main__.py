"""
Todo API — Process Bootstrap
=============================

Usage:
    python -m todo_api [--env-file PATH]
    todo-api [--env-file PATH]

Loads configuration, builds the application and serves it with uvicorn on
`server.host:server.port`. Invalid configuration or a failed database startup
terminates the process with exit status 1.
"""

import argparse
import logging
import sys
from typing import List, Optional

import uvicorn
from pydantic import ValidationError as SettingsValidationError

from todo_api.config import load_settings
from todo_api.main import create_app, setup_logging

logger = logging.getLogger("todo_api")


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="todo-api", description="Run the Todo API server")
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path to a dotenv configuration file (default: config/.env, .env)",
    )
    args = parser.parse_args(argv)

    setup_logging()
    try:
        settings = load_settings(args.env_file)
    except SettingsValidationError as e:
        logger.critical("Error reading configuration: %s", e)
        sys.exit(1)
    logger.info("Configuration loaded")

    setup_logging(settings.log_level)
    app = create_app(settings)

    logger.info("Server starting on port %s", settings.server.port)
    # uvicorn exits non-zero when the lifespan startup raises
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port_number,
        log_config=None,
    )


if __name__ == "__main__":
    main()
