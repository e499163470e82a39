#!/usr/bin/env python3
"""
nodeprobe - Main Entry Point
"""

import logging
import sys
from typing import Optional

from .proxy_core.constants import DEFAULT_LOG_FORMAT, NOISY_LOGGERS


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None):
    """Configure logging for the application"""
    log_level = getattr(logging, str(level).upper(), logging.WARNING)

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format=DEFAULT_LOG_FORMAT,
        handlers=handlers,
        force=True
    )

    # Set third-party loggers to WARNING to reduce noise
    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def main():
    """Main entry point"""
    from .proxy_cli.cli import main_cli

    try:
        return main_cli(standalone_mode=True)
    except KeyboardInterrupt:
        print("\nCancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
