import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> None:
    """Attach one stdout handler to the root logger; no-op when it already has one."""
    value = getattr(logging, (level or os.environ.get("LOG_LEVEL") or "INFO").upper().strip(), None)
    logging.basicConfig(
        level=value if isinstance(value, int) else logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        stream=sys.stdout,
    )


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
