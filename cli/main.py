"""CLI entry point."""

import asyncio
import os
import sys
from pathlib import Path

from common.logging_config import setup_logging
from cli.repl import repl_loop
from sharebox.config import DEFAULT_CONFIG_PATH, Config
from sharebox.manager import FileCollectionManager


async def run(config: Config) -> None:
    """Run the REPL and close the HTTP session afterwards."""
    manager = FileCollectionManager(config)
    try:
        await repl_loop(manager)
    finally:
        await manager.close()


def main() -> None:
    """Entry point for CLI."""
    log_level = 'DEBUG' if '--debug' in sys.argv else os.getenv('LOG_LEVEL', 'INFO')
    if '--debug' in sys.argv:
        sys.argv.remove('--debug')

    config = Config(Path(os.getenv('SHAREBOX_CONFIG', str(DEFAULT_CONFIG_PATH))))
    log_file = config.get_log_file()

    logger = setup_logging('cli', log_level=log_level, log_file=log_file)
    setup_logging('sharebox', log_level=log_level, log_file=log_file)
    logger.debug("Debug logging enabled")

    logger.info("CLI starting...")
    try:
        asyncio.run(run(config))
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        logger.info("CLI exiting")


if __name__ == "__main__":
    main()
