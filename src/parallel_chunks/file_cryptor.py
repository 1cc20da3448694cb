"""Encrypt/decrypt facade comparing whole-file and chunked processing."""

import logging
from pathlib import Path
from typing import List, Optional
from .encryption import DEFAULT_DELAY_DIVISOR, DummyDecryptor, DummyEncryptor
from .engines import ChunkedFileService, SimpleFileService
from .error_handler import ErrorHandler
from .models import ChunkLayout
from .profiler import PerformanceProfiler
from .types import (
    Decryptor,
    DestinationExistsError,
    Encryptor,
    ErrorType,
    OperationResult,
    PathLike,
    ProcessingError,
    TransformError,
    ValidationResult
)


ENCRYPTED_SUFFIX = ".encrypted"
CHUNKED_SUFFIX = ".chunked"


class FileCryptor:
    """
    Runs the same encryption job with both storage strategies.

    The whole-file strategy reads the file, transforms it in one call and
    writes one output file. The chunked strategy hands the transform to the
    chunked engine, which applies it per chunk on a worker pool. Every
    operation is profiled so the two can be compared.

    Output naming for a source file ``<path>``:

    - whole-file ciphertext: ``<path>.encrypted``
    - chunk set directory: ``<path>.encrypted.chunked``
    """

    def __init__(self, layout: Optional[ChunkLayout] = None,
                 max_workers: Optional[int] = None,
                 delay_divisor: int = DEFAULT_DELAY_DIVISOR,
                 encryptor: Optional[Encryptor] = None,
                 decryptor: Optional[Decryptor] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the file cryptor.

        Args:
            layout: Chunk layout for the chunked strategy
            max_workers: Worker pool size (None = number of CPUs)
            delay_divisor: Simulated cipher speed for the default cipher
            encryptor: Optional Encryptor (defaults to DummyEncryptor)
            decryptor: Optional Decryptor (defaults to DummyDecryptor)
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.layout = layout or ChunkLayout()
        self.error_handler = ErrorHandler(self.logger)
        self.error_handler.validate_chunk_size(self.layout.chunk_size_bytes)

        self.simple_file_service = SimpleFileService(logger=self.logger)
        self.chunked_file_service = ChunkedFileService(
            layout=self.layout,
            max_workers=max_workers,
            logger=self.logger
        )
        self.encryptor = encryptor or DummyEncryptor(delay_divisor)
        self.decryptor = decryptor or DummyDecryptor(delay_divisor)
        self.profiler = PerformanceProfiler(self.logger)

    @staticmethod
    def whole_target(path: PathLike) -> Path:
        """Path of the whole-file ciphertext for a source file."""
        return Path(f"{path}{ENCRYPTED_SUFFIX}")

    @staticmethod
    def chunked_target(path: PathLike) -> Path:
        """Path of the chunk set directory for a source file."""
        return Path(f"{path}{ENCRYPTED_SUFFIX}{CHUNKED_SUFFIX}")

    def encrypt(self, path: PathLike) -> List[OperationResult]:
        """Encrypt a file with both strategies, whole-file first."""
        return [self.encrypt_whole(path), self.encrypt_chunked(path)]

    def decrypt(self, path: PathLike) -> List[OperationResult]:
        """Decrypt both encrypted forms of a file, whole-file first."""
        return [self.decrypt_whole(path), self.decrypt_chunked(path)]

    def encrypt_whole(self, path: PathLike) -> OperationResult:
        """
        Encrypt a file in one piece and write it next to the source.

        Args:
            path: Source file

        Returns:
            OperationResult; the duration excludes reading the source
        """
        source = Path(path)
        target = self.whole_target(source)
        self._ensure_valid(self.error_handler.validate_source_file(source))

        self.logger.info("Getting file contents")
        content = self.simple_file_service.read(source)

        with self.profiler.profile_operation("encrypt_whole", len(content)) as profile:
            self.logger.info("Encrypting file")
            encrypted = self._transform_whole(self.encryptor, content)

            self.logger.info("Writing encrypted file")
            self.simple_file_service.write(target, encrypted)
            profile.record_output(len(encrypted))

        result = self._result("encrypt_whole", source, target)
        self.logger.info(f"Encrypting and writing a whole file of {result.input_size} bytes "
                         f"took {result.duration * 1000:.0f} ms")
        return result

    def encrypt_chunked(self, path: PathLike) -> OperationResult:
        """
        Encrypt a file chunk by chunk in parallel.

        Args:
            path: Source file

        Returns:
            OperationResult; the duration excludes reading the source

        Raises:
            DestinationExistsError: If the chunk set directory already exists
        """
        source = Path(path)
        target = self.chunked_target(source)
        self._ensure_valid(self.error_handler.validate_source_file(source))
        self._ensure_valid(self.error_handler.validate_chunk_set_destination(target))

        self.logger.info("Getting file contents")
        content = self.simple_file_service.read(source)
        chunk_count = self.layout.chunk_count_for(len(content))

        with self.profiler.profile_operation("encrypt_chunked", len(content)) as profile:
            self.logger.info("Encrypting & writing file")
            self.chunked_file_service.write(target, content, self.encryptor)
            profile.record_output(self._chunk_set_size(target, chunk_count), chunk_count)

        result = self._result("encrypt_chunked", source, target)
        self.logger.info(f"Encrypting and writing in parallel all chunks of a file of "
                         f"{result.input_size} bytes took {result.duration * 1000:.0f} ms")
        return result

    def decrypt_whole(self, path: PathLike, output: Optional[PathLike] = None) -> OperationResult:
        """
        Read and decrypt the whole-file ciphertext of a source file.

        Args:
            path: Original source file path (the ciphertext is derived from it)
            output: Optional path to write the plaintext to

        Returns:
            OperationResult; the duration includes reading the ciphertext
        """
        source = self.whole_target(path)
        self._ensure_valid(self.error_handler.validate_source_file(source))

        with self.profiler.profile_operation("decrypt_whole") as profile:
            self.logger.info("Getting file contents")
            content = self.simple_file_service.read(source)
            profile.record_input(len(content))

            self.logger.info("Decrypting file")
            decrypted = self._transform_whole(self.decryptor, content)
            profile.record_output(len(decrypted))

        if output is not None:
            self.simple_file_service.write(output, decrypted)

        result = self._result("decrypt_whole", source, output)
        self.logger.info(f"Reading and decrypting a whole file of {result.output_size} bytes "
                         f"took {result.duration * 1000:.0f} ms")
        return result

    def decrypt_chunked(self, path: PathLike, output: Optional[PathLike] = None) -> OperationResult:
        """
        Read and decrypt every chunk of a source file's chunk set in parallel.

        Args:
            path: Original source file path (the chunk set is derived from it)
            output: Optional path to write the plaintext to

        Returns:
            OperationResult; the duration includes reading the chunks
        """
        source = self.chunked_target(path)

        with self.profiler.profile_operation("decrypt_chunked") as profile:
            self.logger.info("Getting file chunks and decrypting them")
            chunk_count = self.chunked_file_service.chunk_count(source)
            decrypted = self.chunked_file_service.read(source, self.decryptor)
            profile.record_input(self._chunk_set_size(source, chunk_count))
            profile.record_output(len(decrypted), chunk_count)

        if output is not None:
            self.simple_file_service.write(output, decrypted)

        result = self._result("decrypt_chunked", source, output)
        self.logger.info(f"Reading and decrypting in parallel a file of {result.output_size} bytes "
                         f"took {result.duration * 1000:.0f} ms")
        return result

    @staticmethod
    def _transform_whole(transform, content: bytes) -> bytes:
        try:
            return transform(content)
        except Exception as e:
            raise TransformError(f"Transform failed for whole file: {e}") from e

    def _chunk_set_size(self, base: Path, chunk_count: int) -> int:
        """Total size of the chunk files of a chunk set."""
        return sum(
            self.layout.chunk_path(base, index).stat().st_size
            for index in range(chunk_count)
        )

    def _result(self, operation: str, source: Path, target: Optional[PathLike]) -> OperationResult:
        metrics = self.profiler.metrics_history[-1]
        return OperationResult(
            operation=operation,
            source=str(source),
            target=str(target) if target is not None else "",
            input_size=metrics.input_size,
            output_size=metrics.output_size,
            chunk_count=metrics.chunk_count,
            duration=metrics.duration
        )

    def _ensure_valid(self, validation: ValidationResult) -> None:
        """Raise the matching ProcessingError for a failed validation."""
        if validation.is_valid:
            return

        messages = [error.message for error in validation.errors]
        if any(error.type == ErrorType.DESTINATION_EXISTS for error in validation.errors):
            raise DestinationExistsError("; ".join(messages), context={"errors": messages})
        raise ProcessingError("; ".join(messages), ErrorType.VALIDATION, context={"errors": messages})
