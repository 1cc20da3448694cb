"""Tests for metadata manager."""

import pytest
from parallel_chunks.engines.metadata_manager import MetadataManager
from parallel_chunks.models import ChunkLayout, ChunkSetMetadata
from parallel_chunks.types import (
    CorruptMetadataError,
    DestinationExistsError,
    MissingMetadataError,
    StorageIOError
)


class TestMetadataManager:
    """Tests for MetadataManager class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.manager = MetadataManager(ChunkLayout(chunk_size_bytes=8))

    def test_write_chunk_count(self, temp_dir):
        """Test writing the count record creates the directory and record."""
        base = temp_dir / "data.chunked"

        metadata = self.manager.write_chunk_count(base, 3)

        assert metadata == ChunkSetMetadata(chunk_count=3)
        assert base.is_dir()
        assert (base / "total_chunks").read_bytes() == b"3"

    def test_write_creates_missing_parents(self, temp_dir):
        """Test that missing parent directories are created."""
        base = temp_dir / "nested" / "deeper" / "data.chunked"

        self.manager.write_chunk_count(base, 1)

        assert (base / "total_chunks").read_text() == "1"

    def test_write_existing_directory(self, temp_dir):
        """Test that an existing directory is never reused."""
        base = temp_dir / "data.chunked"
        base.mkdir()

        with pytest.raises(DestinationExistsError) as exc_info:
            self.manager.write_chunk_count(base, 2)

        assert exc_info.value.context["path"] == str(base)
        assert not (base / "total_chunks").exists()

    def test_write_twice(self, temp_dir):
        """Test that a second write to the same chunk set fails."""
        base = temp_dir / "data.chunked"
        self.manager.write_chunk_count(base, 2)

        with pytest.raises(DestinationExistsError):
            self.manager.write_chunk_count(base, 5)

        assert (base / "total_chunks").read_text() == "2"

    def test_write_under_a_file(self, temp_dir):
        """Test that a parent which is a regular file is a storage error."""
        blocker = temp_dir / "blocker"
        blocker.write_bytes(b"")

        with pytest.raises(StorageIOError):
            self.manager.write_chunk_count(blocker / "data.chunked", 1)

    def test_write_invalid_count(self, temp_dir):
        """Test that an invalid count is rejected before touching disk."""
        base = temp_dir / "data.chunked"

        with pytest.raises(ValueError):
            self.manager.write_chunk_count(base, 0)

        assert not base.exists()

    def test_read_chunk_count(self, temp_dir):
        """Test reading back a written count."""
        base = temp_dir / "data.chunked"
        self.manager.write_chunk_count(base, 56)

        assert self.manager.read_chunk_count(base).chunk_count == 56
        assert self.manager.read_chunk_count(str(base)).chunk_count == 56

    def test_read_missing_record(self, temp_dir):
        """Test reading a directory without a count record."""
        base = temp_dir / "data.chunked"
        base.mkdir()

        with pytest.raises(MissingMetadataError) as exc_info:
            self.manager.read_chunk_count(base)

        assert exc_info.value.context["path"] == str(base / "total_chunks")

    def test_read_missing_directory(self, temp_dir):
        """Test reading a chunk set that was never written."""
        with pytest.raises(MissingMetadataError):
            self.manager.read_chunk_count(temp_dir / "absent")

    @pytest.mark.parametrize("record", [b"", b"abc", b"0", b"-4", b"3.0"])
    def test_read_corrupt_record(self, temp_dir, record):
        """Test reading a record that is not a positive integer."""
        base = temp_dir / "data.chunked"
        base.mkdir()
        (base / "total_chunks").write_bytes(record)

        with pytest.raises(CorruptMetadataError) as exc_info:
            self.manager.read_chunk_count(base)

        assert exc_info.value.context["path"] == str(base / "total_chunks")

    def test_read_non_utf8_record(self, temp_dir):
        """Test reading a record that is not valid UTF-8."""
        base = temp_dir / "data.chunked"
        base.mkdir()
        (base / "total_chunks").write_bytes(b"\xff\xfe")

        with pytest.raises(CorruptMetadataError):
            self.manager.read_chunk_count(base)

    def test_read_record_with_trailing_newline(self, temp_dir):
        """Test that surrounding whitespace in a record is tolerated."""
        base = temp_dir / "data.chunked"
        base.mkdir()
        (base / "total_chunks").write_bytes(b"4\n")

        assert self.manager.read_chunk_count(base).chunk_count == 4

    def test_read_record_that_is_a_directory(self, temp_dir):
        """Test that an unreadable record is a storage error."""
        base = temp_dir / "data.chunked"
        (base / "total_chunks").mkdir(parents=True)

        with pytest.raises(StorageIOError):
            self.manager.read_chunk_count(base)

    def test_has_chunk_count(self, temp_dir):
        """Test checking for a count record."""
        base = temp_dir / "data.chunked"

        assert not self.manager.has_chunk_count(base)
        self.manager.write_chunk_count(base, 1)
        assert self.manager.has_chunk_count(base)
