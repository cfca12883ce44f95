# ========================
# src/sales_metrics/ingestion.py
# ========================

"""
Data Ingestion Module

Reads the raw sales log as numbered text lines, in chunks.
"""

import logging
from typing import Iterator, List

from .exceptions import SourceReadError
from .models import SourceLine

logger = logging.getLogger(__name__)

class LineReader:
    """
    Line source for the sales log.

    Lines are handed out untouched apart from the trailing line terminator;
    splitting into fields is the parser's job. Numbering starts at 0 so the
    header is always line 0, whichever chunk size is used.
    """

    def __init__(self, file_path, encoding: str = 'utf-8'):
        """
        Initialize the line reader.

        Args:
            file_path (str): Path to the sales log
            encoding (str): Text encoding of the file
        """
        self.file_path = file_path
        self.encoding = encoding
        self.lines_read = 0
        logger.info(f"Initialized LineReader for file: {file_path}")

    def read_in_chunks(self, chunk_size: int) -> Iterator[List[SourceLine]]:
        """
        A generator that yields lists of SourceLine for each chunk of the file.

        Args:
            chunk_size (int): The number of lines to yield per chunk.

        Yields:
            list[SourceLine]: Consecutive numbered lines.

        Raises:
            SourceReadError: The file is missing, unreadable or not decodable.
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        self.lines_read = 0
        try:
            # Only \n and \r\n end a line; a lone \r stays inside the field
            with open(self.file_path, 'r', newline='\n', encoding=self.encoding) as f:
                chunk = []
                for number, raw in enumerate(f):
                    chunk.append(SourceLine(number, _strip_terminator(raw)))
                    self.lines_read += 1

                    if len(chunk) == chunk_size:
                        logger.debug(f"Yielding chunk with {len(chunk)} lines")
                        yield chunk
                        chunk = []

                if chunk:
                    logger.debug(f"Yielding final chunk with {len(chunk)} lines")
                    yield chunk

                logger.info(f"Total lines read: {self.lines_read}")

        except FileNotFoundError as e:
            logger.error(f"File '{self.file_path}' was not found")
            raise SourceReadError(self.file_path, "file not found") from e
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading sales log: {e}")
            raise SourceReadError(self.file_path, str(e)) from e

    def read_lines(self) -> List[SourceLine]:
        """Read the whole file in one pass."""
        lines = []
        for chunk in self.read_in_chunks(chunk_size=10000):
            lines.extend(chunk)
        return lines


def _strip_terminator(raw: str) -> str:
    if raw.endswith('\n'):
        raw = raw[:-1]
        if raw.endswith('\r'):
            raw = raw[:-1]
    return raw
