import logging
import sys
from pathlib import Path
from typing import Optional

from .config import LOG_FILE

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%H:%M:%S"

logger = logging.getLogger("kbdaccent")


def setup_logging(verbose: bool = False, log_file: Optional[Path] = LOG_FILE) -> logging.Logger:
    """Attach file + stderr handlers to the kbdaccent logger (idempotent)"""
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(log_file, encoding="utf-8")
            fh.setFormatter(formatter)
            logger.addHandler(fh)
        except OSError as e:
            logger.warning(f"Log file unavailable ({log_file}): {e}")

    return logger
