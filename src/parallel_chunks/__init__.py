"""
Parallel Chunks - chunked file storage with parallel per-chunk transforms.

Stores a file as a directory of fixed-size chunks so that expensive
per-chunk work, such as encryption, can run on a worker pool, and compares
that against processing the file as one blob.
"""

from .engines import ChunkedFileService, MetadataManager, SimpleFileService
from .file_cryptor import FileCryptor
from .models import ChunkLayout, ChunkSetMetadata, DEFAULT_CHUNK_SIZE
from .types import (
    ChunkTransform,
    CorruptMetadataError,
    DestinationExistsError,
    ErrorType,
    MissingChunkError,
    MissingMetadataError,
    OperationResult,
    ProcessingError,
    StorageIOError,
    TransformError
)

__version__ = "1.0.0"
__all__ = [
    "ChunkedFileService",
    "SimpleFileService",
    "MetadataManager",
    "FileCryptor",
    "ChunkLayout",
    "ChunkSetMetadata",
    "DEFAULT_CHUNK_SIZE",
    "ChunkTransform",
    "ErrorType",
    "OperationResult",
    "ProcessingError",
    "MissingMetadataError",
    "CorruptMetadataError",
    "MissingChunkError",
    "DestinationExistsError",
    "TransformError",
    "StorageIOError",
]
