"""Process-wide logging setup."""

from __future__ import annotations

import logging
import sys

logging.getLogger("boto3").setLevel(logging.WARNING)
logging.getLogger("botocore").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)


def setup_logging(level: str = "INFO") -> None:
    """Send all log records to stderr with a timestamped format."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    stream_handler = logging.StreamHandler(stream=sys.stderr)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)
