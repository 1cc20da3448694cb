"""Chunk task result model."""

from dataclasses import dataclass
from typing import Optional
from ..types import ProcessingError


@dataclass
class ChunkResult:
    """
    Outcome of one chunk task.

    Worker tasks never raise; they return a ChunkResult carrying either the
    chunk bytes or the error, and the engine inspects every result once all
    tasks have settled.
    """

    index: int
    data: Optional[bytes] = None
    error: Optional[ProcessingError] = None

    def __post_init__(self):
        """Validate result after initialization."""
        if self.index < 0:
            raise ValueError("index must be non-negative")

        if self.data is not None and self.error is not None:
            raise ValueError("a chunk result cannot carry both data and an error")

    @property
    def succeeded(self) -> bool:
        """True if the chunk task completed without error."""
        return self.error is None

    @property
    def size(self) -> int:
        """Size of the chunk data in bytes (0 for failed or write results)."""
        return len(self.data) if self.data is not None else 0

    @classmethod
    def success(cls, index: int, data: Optional[bytes] = None) -> 'ChunkResult':
        """Build a successful result."""
        return cls(index=index, data=data)

    @classmethod
    def failure(cls, index: int, error: ProcessingError) -> 'ChunkResult':
        """Build a failed result."""
        return cls(index=index, error=error)
