"""Chunk set metadata model: the persisted chunk count."""

from dataclasses import dataclass
from ..types import CorruptMetadataError


@dataclass
class ChunkSetMetadata:
    """
    Metadata stored alongside a chunk set.

    Only the chunk count is persisted, as a UTF-8 decimal integer.
    """

    chunk_count: int

    def __post_init__(self):
        """Validate metadata after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate metadata integrity."""
        if isinstance(self.chunk_count, bool) or not isinstance(self.chunk_count, int):
            raise ValueError("chunk_count must be an integer")

        if self.chunk_count <= 0:
            raise ValueError("chunk_count must be positive")

    def to_record(self) -> str:
        """Convert metadata to the text stored in the count record."""
        return str(self.chunk_count)

    @classmethod
    def from_record(cls, text: str) -> 'ChunkSetMetadata':
        """
        Create ChunkSetMetadata from the text of a count record.

        Args:
            text: Record contents

        Returns:
            ChunkSetMetadata instance

        Raises:
            CorruptMetadataError: If the text is not a positive decimal integer
        """
        stripped = text.strip()

        # int() alone would accept "+3", "1_000" and non-ASCII digits
        if not stripped.isascii() or not stripped.isdigit():
            raise CorruptMetadataError(
                f"Chunk count record is not a positive integer: {text!r}",
                context={"record": text}
            )

        chunk_count = int(stripped)
        if chunk_count <= 0:
            raise CorruptMetadataError(
                f"Chunk count must be positive, got {chunk_count}",
                context={"record": text}
            )

        return cls(chunk_count=chunk_count)
