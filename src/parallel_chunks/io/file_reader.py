"""File reader for raw byte and text records."""

import logging
from pathlib import Path
from typing import Optional
from ..types import PathLike


class FileReader:
    """
    Byte-oriented file reader used by the storage engines.

    Errors are not translated here: a missing file raises FileNotFoundError
    and any other failure raises the underlying OSError, so that callers can
    map them onto their own error taxonomy.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the file reader.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def read_all(self, path: PathLike) -> bytes:
        """
        Read an entire file.

        Args:
            path: File to read

        Returns:
            File contents

        Raises:
            FileNotFoundError: If the file does not exist
            OSError: If the file cannot be read
        """
        data = Path(path).read_bytes()
        self.logger.debug(f"Read {len(data)} bytes from {path}")
        return data

    def read_text(self, path: PathLike, encoding: str = "utf-8") -> str:
        """Read an entire file as text."""
        return Path(path).read_text(encoding=encoding)
