# ========================
# src/climate_stats/ingestion.py
# ========================

"""
Data Ingestion Module

Streams tab-delimited climate observation files one line at a time so that
arbitrarily large inputs never have to fit in memory.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO

logger = logging.getLogger(__name__)

class TDVReader:
    """
    Opens TDV (tab-delimited values) files for a single streaming pass.
    The handle is released on every exit path, including exceptions
    raised while the stream is being consumed.
    """

    def __init__(self, file_path, encoding: str = 'utf-8'):
        """
        Initialize the TDV reader.

        Args:
            file_path (str): Path to the TDV file to read
            encoding (str): Text encoding of the file
        """
        self.file_path = str(file_path)
        self.encoding = encoding
        logger.debug(f"Initialized TDVReader for file: {self.file_path}")

    @contextmanager
    def open(self) -> Iterator[TextIO]:
        """
        Open the file for a single streaming pass.

        Raises:
            OSError: If the file does not exist, is a directory or is unreadable
        """
        path = Path(self.file_path)
        if path.is_dir():
            raise IsADirectoryError(f"Is a directory: '{self.file_path}'")

        # newline='' keeps '\r\n' intact; the parser strips terminators itself.
        # Undecodable bytes become U+FFFD so only the line holding them is affected.
        with open(path, 'r', encoding=self.encoding, errors='replace', newline='') as stream:
            logger.info(f"Opening file: {self.file_path}")
            yield stream
            logger.debug(f"Closing file: {self.file_path}")
