"""Tests for the chunked file service."""

import logging
import threading
import pytest
from concurrent.futures import ThreadPoolExecutor
from parallel_chunks.encryption import DummyDecryptor, DummyEncryptor
from parallel_chunks.engines import ChunkedFileService, identity_transform
from parallel_chunks.io import FileWriter
from parallel_chunks.models import ChunkLayout, DEFAULT_CHUNK_SIZE
from parallel_chunks.types import (
    CorruptMetadataError,
    DestinationExistsError,
    ErrorType,
    MissingChunkError,
    MissingMetadataError,
    StorageIOError,
    TransformError
)


def failing_on(*indices):
    """Transform that raises for chunks whose first byte is one of the given indices."""
    def transform(chunk):
        if chunk[0] in indices:
            raise RuntimeError(f"boom {chunk[0]}")
        return chunk
    return transform


class FailingWriter(FileWriter):
    """FileWriter that cannot write one particular chunk."""

    def __init__(self, failing_name):
        super().__init__()
        self.failing_name = failing_name

    def write_all(self, path, data, exclusive=False):
        if path.name == self.failing_name:
            raise OSError("No space left on device")
        return super().write_all(path, data, exclusive=exclusive)


class TestChunkedFileService:
    """Tests for ChunkedFileService class."""

    @pytest.fixture(autouse=True)
    def setup_service(self, small_layout):
        """Set up test fixtures."""
        self.layout = small_layout
        self.service = ChunkedFileService(layout=small_layout, max_workers=4)

    def test_round_trip(self, temp_dir, binary_content):
        """Test that a write followed by a read returns the same bytes."""
        base = temp_dir / "data.chunked"

        self.service.write(base, binary_content)

        assert self.service.read(base) == binary_content

    def test_chunk_files_on_disk(self, temp_dir, indexed_content):
        """Test the on-disk layout of a chunk set."""
        base = temp_dir / "data.chunked"

        self.service.write(base, indexed_content)

        assert (base / "total_chunks").read_text() == "6"
        assert sorted(p.name for p in base.iterdir()) == sorted(
            ["total_chunks"] + [f"chunk{i}" for i in range(6)]
        )
        for index in range(6):
            assert (base / f"chunk{index}").read_bytes() == bytes([index]) * 8

    def test_empty_content(self, temp_dir):
        """Test that empty content is stored as a single empty chunk."""
        base = temp_dir / "empty.chunked"

        self.service.write(base, b"")

        assert (base / "total_chunks").read_text() == "1"
        assert (base / "chunk0").read_bytes() == b""
        assert self.service.read(base) == b""

    def test_content_of_exactly_one_chunk(self, temp_dir):
        """Test content exactly one chunk long."""
        base = temp_dir / "data.chunked"

        self.service.write(base, b"12345678")

        assert self.service.chunk_count(base) == 1
        assert self.service.read(base) == b"12345678"

    def test_content_one_byte_past_a_chunk(self, temp_dir):
        """Test that one extra byte produces a one-byte second chunk."""
        base = temp_dir / "data.chunked"

        self.service.write(base, b"123456789")

        assert self.service.chunk_count(base) == 2
        assert (base / "chunk0").read_bytes() == b"12345678"
        assert (base / "chunk1").read_bytes() == b"9"
        assert self.service.read(base) == b"123456789"

    def test_default_layout_boundary(self, temp_dir):
        """Test the default 10 MiB chunk size with one byte of overflow."""
        service = ChunkedFileService(max_workers=2)
        base = temp_dir / "large.chunked"
        content = b"a" * DEFAULT_CHUNK_SIZE + b"b"

        service.write(base, content)

        assert service.chunk_count(base) == 2
        assert (base / "chunk0").stat().st_size == DEFAULT_CHUNK_SIZE
        assert (base / "chunk1").read_bytes() == b"b"
        assert service.read(base) == content

    @pytest.mark.parametrize("wrap", [bytearray, memoryview])
    def test_bytes_like_content(self, temp_dir, binary_content, wrap):
        """Test writing bytearray and memoryview content."""
        base = temp_dir / "data.chunked"

        self.service.write(base, wrap(binary_content))

        assert self.service.read(base) == binary_content

    def test_read_preserves_index_order(self, temp_dir, indexed_content):
        """Test that chunks are joined in index order even when they finish in reverse."""
        base = temp_dir / "data.chunked"
        self.service.write(base, indexed_content)

        events = [threading.Event() for _ in range(6)]
        finished = []
        lock = threading.Lock()

        def reverse_gate(chunk):
            index = chunk[0]
            if index < 5:
                assert events[index + 1].wait(timeout=5)
            with lock:
                finished.append(index)
            events[index].set()
            return chunk

        service = ChunkedFileService(layout=self.layout, max_workers=6)
        content = service.read(base, reverse_gate)

        assert finished == [5, 4, 3, 2, 1, 0]
        assert content == indexed_content

    def test_write_preserves_index_order(self, temp_dir, indexed_content):
        """Test that each chunk file holds its own slice regardless of completion order."""
        base = temp_dir / "data.chunked"
        events = [threading.Event() for _ in range(6)]

        def reverse_gate(chunk):
            index = chunk[0]
            if index < 5:
                assert events[index + 1].wait(timeout=5)
            events[index].set()
            return chunk

        service = ChunkedFileService(layout=self.layout, max_workers=6)
        service.write(base, indexed_content, reverse_gate)

        for index in range(6):
            assert (base / f"chunk{index}").read_bytes() == bytes([index]) * 8

    def test_encrypt_decrypt_composition(self, temp_dir, binary_content):
        """Test that per-chunk encryption is undone by per-chunk decryption."""
        base = temp_dir / "data.encrypted.chunked"

        self.service.write(base, binary_content, DummyEncryptor(delay_divisor=0))

        assert self.service.read(base, DummyDecryptor(delay_divisor=0)) == binary_content

    def test_transform_changes_chunk_size(self, temp_dir, indexed_content):
        """Test that transformed chunks may differ in size from the originals."""
        base = temp_dir / "data.encrypted.chunked"

        self.service.write(base, indexed_content, DummyEncryptor(delay_divisor=0))

        # Base64 turns every 8-byte chunk into 12 bytes
        assert (base / "total_chunks").read_text() == "6"
        assert all((base / f"chunk{i}").stat().st_size == 12 for i in range(6))
        assert len(self.service.read(base)) == 72
        assert len(self.service.read(base, identity_transform)) == 72

    def test_write_to_existing_chunk_set(self, temp_dir, indexed_content):
        """Test that writing twice to the same path fails and keeps the first write."""
        base = temp_dir / "data.chunked"
        self.service.write(base, indexed_content)

        with pytest.raises(DestinationExistsError):
            self.service.write(base, b"other content")

        assert self.service.read(base) == indexed_content

    def test_write_to_existing_directory(self, temp_dir):
        """Test that a pre-existing empty directory is not reused."""
        base = temp_dir / "data.chunked"
        base.mkdir()

        with pytest.raises(DestinationExistsError) as exc_info:
            self.service.write(base, b"content")

        assert exc_info.value.error_type == ErrorType.DESTINATION_EXISTS
        assert list(base.iterdir()) == []

    def test_write_transform_failure_without_rollback(self, temp_dir, indexed_content):
        """Test that a failing chunk aborts the write but leaves the other chunks."""
        base = temp_dir / "data.chunked"

        with pytest.raises(TransformError) as exc_info:
            self.service.write(base, indexed_content, failing_on(2))

        error = exc_info.value
        assert error.context["index"] == 2
        assert error.context["operation"] == "write"
        assert error.context["failed_chunks"] == [2]
        assert sorted(error.context["written_chunks"]) == sorted(
            str(base / f"chunk{i}") for i in [0, 1, 3, 4, 5]
        )
        assert isinstance(error.__cause__, RuntimeError)

        assert (base / "total_chunks").read_text() == "6"
        assert not (base / "chunk2").exists()
        for index in [0, 1, 3, 4, 5]:
            assert (base / f"chunk{index}").exists()

    def test_partial_chunk_set_cannot_be_read(self, temp_dir, indexed_content):
        """Test that a chunk set left by a failed write fails to read."""
        base = temp_dir / "data.chunked"
        with pytest.raises(TransformError):
            self.service.write(base, indexed_content, failing_on(2))

        with pytest.raises(MissingChunkError) as exc_info:
            self.service.read(base)

        assert exc_info.value.context["index"] == 2

    def test_lowest_failing_index_is_raised(self, temp_dir, indexed_content):
        """Test that with several failures the lowest index is reported."""
        base = temp_dir / "data.chunked"

        with pytest.raises(TransformError) as exc_info:
            self.service.write(base, indexed_content, failing_on(4, 1))

        assert exc_info.value.context["index"] == 1
        assert exc_info.value.context["failed_chunks"] == [1, 4]

    def test_write_storage_failure(self, temp_dir, indexed_content):
        """Test that a chunk that cannot be written is a storage error."""
        base = temp_dir / "data.chunked"
        service = ChunkedFileService(
            layout=self.layout, max_workers=4, file_writer=FailingWriter("chunk3")
        )

        with pytest.raises(StorageIOError) as exc_info:
            service.write(base, indexed_content)

        assert exc_info.value.context["index"] == 3
        assert isinstance(exc_info.value.__cause__, OSError)
        assert str(base / "chunk3") not in exc_info.value.context["written_chunks"]
        assert len(exc_info.value.context["written_chunks"]) == 5

    def test_read_missing_chunk(self, temp_dir, indexed_content):
        """Test reading a chunk set with a deleted chunk."""
        base = temp_dir / "data.chunked"
        self.service.write(base, indexed_content)
        (base / "chunk3").unlink()

        with pytest.raises(MissingChunkError) as exc_info:
            self.service.read(base)

        assert exc_info.value.context["index"] == 3
        assert exc_info.value.context["operation"] == "read"
        assert exc_info.value.context["failed_chunks"] == [3]
        assert "written_chunks" not in exc_info.value.context

    def test_read_transform_failure(self, temp_dir, indexed_content):
        """Test that a decode failure on read is a transform error."""
        base = temp_dir / "data.chunked"
        self.service.write(base, indexed_content)

        with pytest.raises(TransformError) as exc_info:
            self.service.read(base, DummyDecryptor(delay_divisor=0))

        assert exc_info.value.context["failed_chunks"] == list(range(6))
        assert exc_info.value.context["index"] == 0

    def test_read_without_metadata(self, temp_dir):
        """Test reading a path that holds no chunk set."""
        with pytest.raises(MissingMetadataError):
            self.service.read(temp_dir / "absent.chunked")

    def test_read_corrupt_metadata(self, temp_dir, indexed_content):
        """Test reading a chunk set whose count record is damaged."""
        base = temp_dir / "data.chunked"
        self.service.write(base, indexed_content)
        (base / "total_chunks").write_text("six")

        with pytest.raises(CorruptMetadataError):
            self.service.read(base)

    def test_read_ignores_extra_chunks(self, temp_dir):
        """Test that chunks beyond the recorded count are not read."""
        base = temp_dir / "data.chunked"
        self.service.write(base, b"abc")
        (base / "chunk1").write_bytes(b"stray")

        assert self.service.read(base) == b"abc"

    def test_non_bytes_transform_result(self, temp_dir):
        """Test that a transform returning a non-bytes value fails."""
        base = temp_dir / "data.chunked"

        with pytest.raises(TransformError, match="expected bytes"):
            self.service.write(base, b"content", lambda chunk: chunk.decode())

    def test_injected_executor_is_not_shut_down(self, temp_dir, indexed_content):
        """Test that an externally managed executor outlives the operation."""
        executor = ThreadPoolExecutor(max_workers=3)
        try:
            service = ChunkedFileService(layout=self.layout, executor=executor)
            base = temp_dir / "data.chunked"

            service.write(base, indexed_content)
            assert service.read(base) == indexed_content

            assert executor.submit(lambda: 42).result() == 42
        finally:
            executor.shutdown()

    def test_single_worker(self, temp_dir, binary_content):
        """Test that a single worker still processes every chunk."""
        service = ChunkedFileService(layout=self.layout, max_workers=1)
        base = temp_dir / "data.chunked"

        service.write(base, binary_content)

        assert service.read(base) == binary_content

    @pytest.mark.parametrize("workers", [0, -2])
    def test_invalid_worker_count(self, workers):
        """Test that a non-positive worker count is rejected."""
        with pytest.raises(ValueError, match="max_workers"):
            ChunkedFileService(max_workers=workers)

    def test_default_worker_count(self):
        """Test that the worker count defaults to a positive number."""
        assert ChunkedFileService().max_workers >= 1

    def test_write_state_logging(self, temp_dir, caplog):
        """Test that write lifecycle states are logged."""
        caplog.set_level(logging.DEBUG)

        self.service.write(temp_dir / "ok.chunked", b"content")
        with pytest.raises(TransformError):
            self.service.write(temp_dir / "bad.chunked", b"content", failing_on(ord("c")))

        assert "ok.chunked: metadata_written" in caplog.text
        assert "ok.chunked: completed" in caplog.text
        assert "bad.chunked: failed" in caplog.text

    def test_join_chunks(self):
        """Test joining chunks in the given order."""
        assert ChunkedFileService.join_chunks([b"ab", b"", b"c"]) == b"abc"
        assert ChunkedFileService.join_chunks([]) == b""
