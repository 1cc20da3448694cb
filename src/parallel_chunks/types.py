"""Core type definitions for Parallel Chunks."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union


PathLike = Union[str, Path]

# A chunk transform maps the bytes of one chunk to new bytes. It must be
# pure: the engine calls it concurrently from several worker threads.
ChunkTransform = Callable[[bytes], bytes]


class ErrorType(Enum):
    """Enumeration of error types."""
    MISSING_METADATA = "missing_metadata"
    CORRUPT_METADATA = "corrupt_metadata"
    MISSING_CHUNK = "missing_chunk"
    DESTINATION_EXISTS = "destination_exists"
    TRANSFORM = "transform"
    IO = "io"
    VALIDATION = "validation"


class WriteState(Enum):
    """Lifecycle of a single chunked write call."""
    NOT_STARTED = "not_started"
    METADATA_WRITTEN = "metadata_written"
    CHUNKS_IN_FLIGHT = "chunks_in_flight"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ValidationError:
    """Validation error details."""
    type: ErrorType
    message: str
    location: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of input validation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[str]


@dataclass
class ErrorResponse:
    """Response for error handling."""
    can_recover: bool
    suggested_action: str
    partial_results: Optional[Any] = None


@dataclass
class OperationResult:
    """Result of an encrypt or decrypt operation."""
    operation: str
    source: str
    target: str
    input_size: int
    output_size: int
    chunk_count: int
    duration: float


class ProcessingError(Exception):
    """Base exception for every failure raised by the storage engines."""

    error_type = ErrorType.IO

    def __init__(self, message: str, error_type: Optional[ErrorType] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        if error_type is not None:
            self.error_type = error_type
        self.context = context if context is not None else {}


class MissingMetadataError(ProcessingError):
    """The chunk count record does not exist."""
    error_type = ErrorType.MISSING_METADATA


class CorruptMetadataError(ProcessingError):
    """The chunk count record is not a positive integer."""
    error_type = ErrorType.CORRUPT_METADATA


class MissingChunkError(ProcessingError):
    """A chunk named by the count record is absent or unreadable."""
    error_type = ErrorType.MISSING_CHUNK


class DestinationExistsError(ProcessingError):
    """The write target already holds a chunk set or part of one."""
    error_type = ErrorType.DESTINATION_EXISTS


class TransformError(ProcessingError):
    """The caller-supplied transform raised while processing a chunk."""
    error_type = ErrorType.TRANSFORM


class StorageIOError(ProcessingError):
    """Generic storage failure wrapping the originating OSError."""
    error_type = ErrorType.IO


# Abstract base classes for interfaces

class FileServiceInterface(ABC):
    """Abstract interface for reading and writing logical files."""

    @abstractmethod
    def read(self, path: PathLike) -> bytes:
        """Read the full contents of a logical file."""
        pass

    @abstractmethod
    def write(self, path: PathLike, content: bytes) -> None:
        """Write the full contents of a logical file."""
        pass


class Encryptor(ABC):
    """Abstract interface for an encryption transform."""

    @abstractmethod
    def encrypt(self, unencrypted: bytes) -> bytes:
        """Encrypt a byte buffer."""
        pass

    def __call__(self, data: bytes) -> bytes:
        return self.encrypt(data)


class Decryptor(ABC):
    """Abstract interface for a decryption transform."""

    @abstractmethod
    def decrypt(self, encrypted: bytes) -> bytes:
        """Decrypt a byte buffer."""
        pass

    def __call__(self, data: bytes) -> bytes:
        return self.decrypt(data)
