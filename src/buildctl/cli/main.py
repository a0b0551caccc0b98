"""
Command-line entry point for buildctl.

Configures internal logging and hands the argument vector to the top-level
run function. Build output itself does not go through ``logging``; it is
written by the build logger to the bound streams.
"""

import logging
import sys

from ..config.settings import LOG_DATE_FORMAT, LOG_FORMAT, get_log_level
from ..orchestration.runner import start

logger = logging.getLogger(__name__)


def main_cli() -> None:
    """
    Main command-line interface for buildctl.

    Internal diagnostics go to standard error at the level named by the
    ``BUILDCTL_LOG_LEVEL`` environment variable (WARNING by default).

    Raises:
        SystemExit: Always, with the exit status of the invocation.
    """
    logging.basicConfig(
        level=get_log_level(),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )
    logger.debug(f"Starting with arguments: {sys.argv[1:]}")
    sys.exit(start(sys.argv[1:]))


if __name__ == "__main__":
    main_cli()
