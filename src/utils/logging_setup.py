# ========================
# src/utils/logging_setup.py
# ========================

"""
Logging Configuration

Diagnostics (bad files, skipped lines, progress) go to stderr; stdout is
reserved for the per-state report so it can be piped or diffed as-is.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

def setup_logging(log_level: str = "WARNING",
                  log_file: Optional[str] = None,
                  log_dir: str = "logs") -> None:
    """
    Route diagnostics for a climate-stats run.

    The stderr handler honours ``log_level``. When ``log_file`` is given it is
    created under ``log_dir`` and receives everything down to DEBUG, including
    rejected-line messages that the console level may hide. Calling this again
    replaces the handlers installed by the previous call.

    Args:
        log_level (str): Console threshold (DEBUG, INFO, WARNING, ERROR, CRITICAL);
                         unknown names fall back to WARNING
        log_file (str): Optional file name for a full DEBUG transcript
        log_dir (str): Directory for ``log_file``; only created when a file is requested
    """
    level = getattr(logging, str(log_level).upper(), logging.WARNING)
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if log_file else level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(formatter)
    root_logger.addHandler(stderr_handler)

    if log_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        transcript = logging.FileHandler(log_path / log_file)
        transcript.setLevel(logging.DEBUG)
        transcript.setFormatter(formatter)
        root_logger.addHandler(transcript)

        logging.info(f"Writing log transcript to {log_path / log_file}")

    logging.debug(f"Console log level: {logging.getLevelName(level)}")

def get_logger(name: str) -> logging.Logger:
    """Return the module logger for ``name``."""
    return logging.getLogger(name)
