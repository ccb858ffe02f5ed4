"""Logging utilities."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "WARNING"):
    """Setup logging configuration.

    Records go to stderr so command output on stdout stays parseable.
    """
    log_level = getattr(logging, str(level).upper(), logging.WARNING)

    logging.basicConfig(
        level=log_level,
        format='%(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[
            RichHandler(console=Console(stderr=True), show_path=False)
        ]
    )
