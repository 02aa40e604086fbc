"""Launcher - Main entry point."""

import logging
import sys

from config import get_config
from launcher.interfaces.cli.commands import cli
from launcher.startup import startup_checks

logger = logging.getLogger(__name__)


def main():
    """Main entry point."""
    config = get_config()

    # Configure logging
    logging.basicConfig(
        level=config.effective_log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Run startup checks
    try:
        context = startup_checks(config)
    except Exception as e:
        logger.error(f"Startup checks failed: {e}")
        sys.exit(1)

    # Run the CLI
    try:
        cli(obj=context)
    finally:
        context.close()


if __name__ == "__main__":
    main()
