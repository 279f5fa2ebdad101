"""
Logging setup.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_path: Optional[str], log_level: str = "INFO") -> None:
    """
    Configure root logging with a stream handler and, when log_path is set,
    a file handler.
    """
    handlers = [logging.StreamHandler()]
    if log_path:
        log_dir = os.path.dirname(log_path)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        handlers.insert(0, logging.FileHandler(log_path))

    logging.basicConfig(
        level=getattr(logging, str(log_level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
