"""
Script contains logging setup for the snapshot sync tools
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(name="pokesync")


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger once, before any sync work starts."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
    )
    # urllib3 is chatty at DEBUG about every pooled connection
    logging.getLogger("urllib3").setLevel(logging.WARNING)
