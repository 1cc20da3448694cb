"""Metadata manager for the chunk count record."""

import logging
from pathlib import Path
from typing import Optional
from ..io import FileReader, FileWriter
from ..models import ChunkLayout, ChunkSetMetadata
from ..types import (
    PathLike,
    CorruptMetadataError,
    DestinationExistsError,
    MissingMetadataError,
    StorageIOError
)


class MetadataManager:
    """
    Manager for reading and writing the count record of a chunk set.

    The count record is the first thing written and the first thing read:
    creating it also claims the chunk set directory, so two writers can
    never end up sharing one.
    """

    def __init__(self, layout: Optional[ChunkLayout] = None,
                 file_reader: Optional[FileReader] = None,
                 file_writer: Optional[FileWriter] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the metadata manager.

        Args:
            layout: Chunk layout used to locate the count record
            file_reader: Optional FileReader instance
            file_writer: Optional FileWriter instance
            logger: Optional logger instance
        """
        self.layout = layout or ChunkLayout()
        self.logger = logger or logging.getLogger(__name__)
        self.file_reader = file_reader or FileReader(self.logger)
        self.file_writer = file_writer or FileWriter(self.logger)

    def write_chunk_count(self, base: PathLike, chunk_count: int) -> ChunkSetMetadata:
        """
        Create the chunk set directory and its count record.

        Args:
            base: Chunk set directory; must not exist yet
            chunk_count: Number of chunks the set will hold

        Returns:
            The persisted ChunkSetMetadata

        Raises:
            DestinationExistsError: If the directory or record already exists
            StorageIOError: If the directory or record cannot be created
        """
        metadata = ChunkSetMetadata(chunk_count=chunk_count)
        base_path = Path(base)
        record_path = self.layout.count_record_path(base_path)

        try:
            self.file_writer.create_directory(base_path, exist_ok=False)
        except FileExistsError as e:
            raise DestinationExistsError(
                f"Chunk set destination already exists: {base_path}",
                context={"path": str(base_path)}
            ) from e
        except OSError as e:
            raise StorageIOError(
                f"Failed to create chunk set directory {base_path}: {e}",
                context={"path": str(base_path)}
            ) from e

        try:
            self.file_writer.write_text(record_path, metadata.to_record(), exclusive=True)
        except FileExistsError as e:
            raise DestinationExistsError(
                f"Chunk count record already exists: {record_path}",
                context={"path": str(record_path)}
            ) from e
        except OSError as e:
            raise StorageIOError(
                f"Failed to write chunk count record {record_path}: {e}",
                context={"path": str(record_path)}
            ) from e

        self.logger.debug(f"Wrote chunk count {chunk_count} to {record_path}")
        return metadata

    def read_chunk_count(self, base: PathLike) -> ChunkSetMetadata:
        """
        Load the count record of a chunk set.

        Args:
            base: Chunk set directory

        Returns:
            ChunkSetMetadata read from disk

        Raises:
            MissingMetadataError: If the record does not exist
            CorruptMetadataError: If the record is not a positive integer
            StorageIOError: If the record cannot be read
        """
        record_path = self.layout.count_record_path(base)

        try:
            text = self.file_reader.read_text(record_path)
        except FileNotFoundError as e:
            raise MissingMetadataError(
                f"Chunk count record not found: {record_path}",
                context={"path": str(record_path)}
            ) from e
        except UnicodeDecodeError as e:
            raise CorruptMetadataError(
                f"Chunk count record is not valid UTF-8: {record_path}",
                context={"path": str(record_path)}
            ) from e
        except OSError as e:
            raise StorageIOError(
                f"Failed to read chunk count record {record_path}: {e}",
                context={"path": str(record_path)}
            ) from e

        try:
            metadata = ChunkSetMetadata.from_record(text)
        except CorruptMetadataError as e:
            e.context["path"] = str(record_path)
            self.logger.error(f"Corrupt chunk count record at {record_path}: {text!r}")
            raise

        self.logger.debug(f"Read chunk count {metadata.chunk_count} from {record_path}")
        return metadata

    def has_chunk_count(self, base: PathLike) -> bool:
        """Check whether a count record exists for the chunk set."""
        return self.layout.count_record_path(base).is_file()
