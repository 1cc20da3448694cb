"""Chunk layout: how a logical file maps onto chunk files."""

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple
from ..types import PathLike


DEFAULT_CHUNK_SIZE = 10 * 1024 * 1024  # 10 MiB
DEFAULT_CHUNK_NAME_PREFIX = "chunk"
DEFAULT_COUNT_RECORD_NAME = "total_chunks"


@dataclass(frozen=True)
class ChunkLayout:
    """
    Deterministic naming and sizing rules for a chunk set.

    Every method is a pure function of its arguments and the layout's
    fields, so a reader and a writer built with equal layouts always agree
    on where each chunk lives and how large it is.
    """

    chunk_size_bytes: int = DEFAULT_CHUNK_SIZE
    chunk_name_prefix: str = DEFAULT_CHUNK_NAME_PREFIX
    count_record_name: str = DEFAULT_COUNT_RECORD_NAME

    def __post_init__(self):
        """Validate layout after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate layout fields."""
        if self.chunk_size_bytes <= 0:
            raise ValueError("chunk_size_bytes must be positive")

        if not self.chunk_name_prefix:
            raise ValueError("chunk_name_prefix cannot be empty")

        if not self.count_record_name:
            raise ValueError("count_record_name cannot be empty")

        if self.count_record_name.startswith(self.chunk_name_prefix):
            # e.g. prefix "chunk" with a record named "chunk7"
            suffix = self.count_record_name[len(self.chunk_name_prefix):]
            if suffix.isdigit():
                raise ValueError("count_record_name collides with chunk file names")

    def chunk_count_for(self, length: int) -> int:
        """
        Number of chunks a buffer of the given length is split into.

        Args:
            length: Content length in bytes

        Returns:
            1 for anything up to one chunk (including empty content),
            otherwise ceil(length / chunk_size_bytes)
        """
        if length < 0:
            raise ValueError(f"length must be non-negative, got {length}")

        if length <= self.chunk_size_bytes:
            return 1
        return math.ceil(length / self.chunk_size_bytes)

    def chunk_range(self, index: int, length: int) -> Tuple[int, int]:
        """
        Byte range of one chunk within the original content.

        Args:
            index: Chunk index
            length: Total content length in bytes

        Returns:
            (offset, count) tuple

        Raises:
            IndexError: If index is outside [0, chunk_count_for(length))
        """
        chunk_count = self.chunk_count_for(length)
        if not 0 <= index < chunk_count:
            raise IndexError(f"chunk index {index} out of range for {chunk_count} chunks")

        offset = index * self.chunk_size_bytes
        count = min(length - offset, self.chunk_size_bytes)
        return offset, count

    def chunk_path(self, base: PathLike, index: int) -> Path:
        """Path of the chunk file with the given index."""
        if index < 0:
            raise IndexError(f"chunk index must be non-negative, got {index}")
        return Path(base) / f"{self.chunk_name_prefix}{index}"

    def count_record_path(self, base: PathLike) -> Path:
        """Path of the record holding the chunk count."""
        return Path(base) / self.count_record_name

    def get_chunk_size_mb(self) -> float:
        """Get chunk size in megabytes."""
        return self.chunk_size_bytes / (1024 * 1024)
