"""Logging setup for the API process."""

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once for the application."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )
