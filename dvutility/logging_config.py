import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure the root logger once.

    Args:
        level: Log level name, defaults to the configured LOG_LEVEL
        log_file: Optional path for a rotating log file
    """
    if level is None:
        from .config import get_config

        config = get_config()
        level = config.logging.level
        log_file = log_file or config.logging.log_file

    logging.captureWarnings(True)

    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(level.upper())

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    # stderr, stdout stays clean for CLI output
    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    root.addHandler(sh)

    if log_file:
        fh = RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=2, encoding="utf-8")
        fh.setFormatter(fmt)
        root.addHandler(fh)
