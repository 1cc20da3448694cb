"""Data models for Parallel Chunks."""

from .chunk import ChunkResult
from .chunk_layout import ChunkLayout, DEFAULT_CHUNK_SIZE
from .chunk_set_metadata import ChunkSetMetadata

__all__ = ["ChunkResult", "ChunkLayout", "ChunkSetMetadata", "DEFAULT_CHUNK_SIZE"]
