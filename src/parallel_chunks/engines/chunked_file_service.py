"""Chunked storage engine: parallel per-chunk read/write with transforms."""

import logging
import os
from concurrent.futures import Executor, ThreadPoolExecutor, wait
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional, Sequence, Union
from ..io import FileReader, FileWriter
from ..models import ChunkLayout, ChunkResult
from ..types import (
    ChunkTransform,
    FileServiceInterface,
    PathLike,
    ProcessingError,
    WriteState,
    DestinationExistsError,
    MissingChunkError,
    StorageIOError,
    TransformError
)
from .metadata_manager import MetadataManager


BytesLike = Union[bytes, bytearray, memoryview]


def identity_transform(chunk: bytes) -> bytes:
    """Default read transform: return the chunk unchanged."""
    return chunk


def _with_cause(error: ProcessingError, cause: BaseException) -> ProcessingError:
    error.__cause__ = cause
    return error


class ChunkedFileService(FileServiceInterface):
    """
    File service that stores a logical file as a directory of chunks.

    A write splits the content into fixed-size chunks and persists each one
    from its own worker task, optionally transforming it first. A read loads
    and transforms every chunk concurrently and joins the results in index
    order, so task scheduling is never visible in the output.

    Failures are fail-fast without rollback: every task is allowed to settle,
    then the failure of the lowest failing index is raised. Chunks already
    written by a failed write stay on disk.
    """

    def __init__(self, layout: Optional[ChunkLayout] = None,
                 max_workers: Optional[int] = None,
                 executor: Optional[Executor] = None,
                 metadata_manager: Optional[MetadataManager] = None,
                 file_reader: Optional[FileReader] = None,
                 file_writer: Optional[FileWriter] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the chunked file service.

        Args:
            layout: Chunk layout (chunk size and file naming)
            max_workers: Worker pool size (None = number of CPUs)
            executor: Optional externally managed executor; when given,
                max_workers is ignored and the executor is never shut down
            metadata_manager: Optional MetadataManager instance
            file_reader: Optional FileReader instance
            file_writer: Optional FileWriter instance
            logger: Optional logger instance
        """
        if max_workers is not None and max_workers <= 0:
            raise ValueError("max_workers must be positive")

        self.layout = layout or ChunkLayout()
        self.max_workers = max_workers or os.cpu_count() or 1
        self.executor = executor
        self.logger = logger or logging.getLogger(__name__)
        self.file_reader = file_reader or FileReader(self.logger)
        self.file_writer = file_writer or FileWriter(self.logger)
        self.metadata_manager = metadata_manager or MetadataManager(
            self.layout, self.file_reader, self.file_writer, self.logger
        )

    def read(self, path: PathLike, transform: Optional[ChunkTransform] = None) -> bytes:
        """
        Read every chunk of a file, transform each one, and join them.

        Args:
            path: Chunk set directory
            transform: Function applied to each chunk after it is loaded
                (identity if omitted)

        Returns:
            The joined, transformed content

        Raises:
            MissingMetadataError: If the count record is absent
            CorruptMetadataError: If the count record is not a positive integer
            MissingChunkError: If a chunk file is absent
            TransformError: If the transform raised for any chunk
            StorageIOError: For any other storage failure
        """
        base = Path(path)
        transform = transform or identity_transform

        metadata = self.metadata_manager.read_chunk_count(base)
        self.logger.info(f"Reading {metadata.chunk_count} chunks from {base}")

        results = self._run_chunk_tasks(
            self._read_chunk, range(metadata.chunk_count), base, transform
        )
        self._raise_on_failure(results, "read", base)

        content = self.join_chunks([result.data for result in results])
        self.logger.info(f"Read {len(content)} bytes from {metadata.chunk_count} chunks in {base}")
        return content

    def write(self, path: PathLike, content: BytesLike,
              transform: Optional[ChunkTransform] = None) -> None:
        """
        Split content into chunks and write them in parallel.

        The count record is written first. Content that fits in a single
        chunk still gets the chunked layout, with one chunk.

        Args:
            path: Chunk set directory; must not exist yet
            content: Content to write
            transform: Optional function applied to each chunk before it is
                written (raw bytes are written if omitted)

        Raises:
            DestinationExistsError: If the directory, record or a chunk exists
            TransformError: If the transform raised for any chunk
            StorageIOError: For any other storage failure
        """
        base = Path(path)
        view = memoryview(content).cast("B")
        chunk_count = self.layout.chunk_count_for(len(view))

        self._log_state(base, WriteState.NOT_STARTED)

        try:
            self.metadata_manager.write_chunk_count(base, chunk_count)
        except ProcessingError:
            self._log_state(base, WriteState.FAILED)
            raise

        self._log_state(base, WriteState.METADATA_WRITTEN)

        self.logger.info(f"Writing {len(view)} bytes as {chunk_count} chunks to {base}")
        self._log_state(base, WriteState.CHUNKS_IN_FLIGHT)

        results = self._run_chunk_tasks(
            self._write_chunk, range(chunk_count), base, view, transform
        )

        try:
            self._raise_on_failure(results, "write", base)
        except ProcessingError:
            self._log_state(base, WriteState.FAILED)
            raise

        self._log_state(base, WriteState.COMPLETED)
        self.logger.info(f"Wrote {chunk_count} chunks to {base}")

    def chunk_count(self, path: PathLike) -> int:
        """Number of chunks recorded for an existing chunk set."""
        return self.metadata_manager.read_chunk_count(path).chunk_count

    @staticmethod
    def join_chunks(chunks: Sequence[bytes]) -> bytes:
        """
        Join chunks into one buffer, in the order given.

        The result is sized to the sum of the chunk lengths, which is not
        necessarily the original content length when a transform changes
        chunk sizes.
        """
        return b"".join(chunks)

    def _read_chunk(self, index: int, base: Path, transform: ChunkTransform) -> ChunkResult:
        """Load and transform one chunk. Never raises."""
        chunk_path = self.layout.chunk_path(base, index)
        context = {"index": index, "path": str(chunk_path)}

        try:
            raw = self.file_reader.read_all(chunk_path)
        except FileNotFoundError as e:
            return ChunkResult.failure(index, _with_cause(MissingChunkError(
                f"Chunk {index} not found: {chunk_path}", context=context
            ), e))
        except OSError as e:
            return ChunkResult.failure(index, _with_cause(StorageIOError(
                f"Failed to read chunk {index} at {chunk_path}: {e}", context=context
            ), e))

        try:
            data = self._apply_transform(transform, raw, index)
        except TransformError as e:
            e.context.update(context)
            return ChunkResult.failure(index, e)

        self.logger.debug(f"Chunk {index}: read {len(raw)} bytes, transformed to {len(data)} bytes")
        return ChunkResult.success(index, data)

    def _write_chunk(self, index: int, base: Path, view: memoryview,
                     transform: Optional[ChunkTransform]) -> ChunkResult:
        """Slice, optionally transform, and persist one chunk. Never raises."""
        offset, count = self.layout.chunk_range(index, len(view))
        chunk_path = self.layout.chunk_path(base, index)
        context = {"index": index, "path": str(chunk_path)}
        piece = view[offset:offset + count]

        if transform is not None:
            try:
                data = self._apply_transform(transform, bytes(piece), index)
            except TransformError as e:
                e.context.update(context)
                return ChunkResult.failure(index, e)
        else:
            data = piece

        try:
            written = self.file_writer.write_all(chunk_path, data, exclusive=True)
        except FileExistsError as e:
            return ChunkResult.failure(index, _with_cause(DestinationExistsError(
                f"Chunk {index} already exists: {chunk_path}", context=context
            ), e))
        except OSError as e:
            return ChunkResult.failure(index, _with_cause(StorageIOError(
                f"Failed to write chunk {index} to {chunk_path}: {e}", context=context
            ), e))

        self.logger.debug(f"Chunk {index}: wrote {written} bytes (offset {offset}, length {count})")
        return ChunkResult.success(index)

    @staticmethod
    def _apply_transform(transform: ChunkTransform, data: bytes, index: int) -> bytes:
        """Run a transform, turning any exception or non-bytes result into TransformError."""
        try:
            result = transform(data)
        except Exception as e:
            raise TransformError(f"Transform failed for chunk {index}: {e}") from e

        if not isinstance(result, (bytes, bytearray, memoryview)):
            raise TransformError(
                f"Transform for chunk {index} returned {type(result).__name__}, expected bytes"
            )
        return bytes(result)

    @contextmanager
    def _executor_scope(self) -> Iterator[Executor]:
        """Yield the injected executor, or a worker pool that lives for one operation."""
        if self.executor is not None:
            yield self.executor
            return

        with ThreadPoolExecutor(max_workers=self.max_workers,
                                thread_name_prefix="chunk-worker") as executor:
            yield executor

    def _run_chunk_tasks(self, task, indices: Sequence[int], *args: Any) -> List[ChunkResult]:
        """
        Run one task per chunk index and wait for all of them.

        Returns:
            Results ordered by index, whatever order the tasks finished in
        """
        with self._executor_scope() as executor:
            futures = [executor.submit(task, index, *args) for index in indices]
            wait(futures)

        return [future.result() for future in futures]

    def _raise_on_failure(self, results: List[ChunkResult], operation: str, base: Path) -> None:
        """Raise the lowest-index failure, annotated with every failed index."""
        failures = [result for result in results if not result.succeeded]
        if not failures:
            return

        for failure in failures:
            self.logger.error(f"Chunk {failure.index} of {base} failed during {operation}: {failure.error}")

        error = failures[0].error
        error.context["operation"] = operation
        error.context["chunk_set"] = str(base)
        error.context["failed_chunks"] = [failure.index for failure in failures]
        if operation == "write":
            error.context["written_chunks"] = [
                str(self.layout.chunk_path(base, result.index))
                for result in results if result.succeeded
            ]
        raise error

    def _log_state(self, base: Path, state: WriteState) -> None:
        self.logger.debug(f"Write to {base}: {state.value}")
