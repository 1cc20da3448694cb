"""File writer for chunk bodies, count records and whole files."""

import logging
from pathlib import Path
from typing import Optional, Union
from ..types import PathLike


class FileWriter:
    """
    Byte-oriented file writer used by the storage engines.

    Handles directory creation and exclusive file creation. Like FileReader
    it lets OSError subclasses propagate untouched.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the file writer.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def write_all(self, path: PathLike, data: Union[bytes, memoryview],
                  exclusive: bool = False) -> int:
        """
        Write a buffer to a file.

        Args:
            path: Destination file; its parent directory must exist
            data: Bytes to write
            exclusive: Fail instead of overwriting an existing file

        Returns:
            Number of bytes written

        Raises:
            FileExistsError: If exclusive is set and the file exists
            FileNotFoundError: If the parent directory is missing
            OSError: If the file cannot be written
        """
        mode = 'xb' if exclusive else 'wb'
        with open(path, mode) as f:
            written = f.write(data)

        self.logger.debug(f"Wrote {written} bytes to {path}")
        return written

    def write_text(self, path: PathLike, text: str, exclusive: bool = False,
                   encoding: str = "utf-8") -> int:
        """Write text to a file, encoded with the given encoding."""
        return self.write_all(path, text.encode(encoding), exclusive=exclusive)

    def create_directory(self, directory_path: PathLike, exist_ok: bool = False) -> Path:
        """
        Create a directory and any missing parents.

        Args:
            directory_path: Directory to create
            exist_ok: Accept an already existing directory

        Returns:
            The created directory path

        Raises:
            FileExistsError: If the directory exists and exist_ok is False
            OSError: If the directory cannot be created
        """
        path = Path(directory_path)
        path.mkdir(parents=True, exist_ok=exist_ok)
        self.logger.debug(f"Created directory {path}")
        return path
