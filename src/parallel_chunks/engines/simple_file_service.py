"""Whole-file service: the single-blob counterpart of the chunked engine."""

import logging
from typing import Optional
from ..io import FileReader, FileWriter
from ..types import FileServiceInterface, PathLike, StorageIOError


class SimpleFileService(FileServiceInterface):
    """
    File service that reads and writes a logical file as one plain file.

    Used as the baseline against which the chunked engine is compared.
    """

    def __init__(self, file_reader: Optional[FileReader] = None,
                 file_writer: Optional[FileWriter] = None,
                 logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.file_reader = file_reader or FileReader(self.logger)
        self.file_writer = file_writer or FileWriter(self.logger)

    def read(self, path: PathLike) -> bytes:
        """Read a whole file, raising StorageIOError if it is missing or unreadable."""
        try:
            return self.file_reader.read_all(path)
        except OSError as e:
            raise StorageIOError(f"Failed to read {path}: {e}", context={"path": str(path)}) from e

    def write(self, path: PathLike, content: bytes) -> None:
        """Write a whole file, replacing any previous contents."""
        try:
            self.file_writer.write_all(path, content)
        except OSError as e:
            raise StorageIOError(f"Failed to write {path}: {e}", context={"path": str(path)}) from e
