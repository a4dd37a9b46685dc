"""
Logging setup for the service.

Every module logs through ``logging.getLogger(__name__)``; this module only
attaches a console handler to the root logger. It is a no-op when the root
logger already has handlers (uvicorn, pytest), so calling it repeatedly is safe.
"""

import logging


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with a console handler at ``level``."""
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
