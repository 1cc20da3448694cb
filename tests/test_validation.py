"""Tests for validation utilities."""

import pytest
from parallel_chunks.types import ErrorType
from parallel_chunks.utils.validation import ValidationUtils


class TestValidateChunkSize:
    """Tests for chunk size validation."""

    def test_default_size_is_valid(self):
        """Test that the default chunk size passes cleanly."""
        result = ValidationUtils.validate_chunk_size(10 * 1024 * 1024)

        assert result.is_valid
        assert result.warnings == []

    @pytest.mark.parametrize("size", [0, -1])
    def test_non_positive_size(self, size):
        """Test that non-positive sizes are invalid."""
        result = ValidationUtils.validate_chunk_size(size)

        assert not result.is_valid
        assert result.errors[0].location == "chunk_size"

    @pytest.mark.parametrize("size", ["10", 1.5, True])
    def test_non_integer_size(self, size):
        """Test that non-integer sizes are invalid."""
        result = ValidationUtils.validate_chunk_size(size)

        assert not result.is_valid
        assert "integer" in result.errors[0].message

    def test_small_size_warns(self):
        """Test that very small chunks produce a warning."""
        result = ValidationUtils.validate_chunk_size(16)

        assert result.is_valid
        assert "very small" in result.warnings[0]

    def test_large_size_warns(self):
        """Test that very large chunks produce a warning."""
        result = ValidationUtils.validate_chunk_size(1024 * 1024 * 1024)

        assert result.is_valid
        assert "very large" in result.warnings[0]


class TestValidateSourceFile:
    """Tests for source file validation."""

    def test_existing_file(self, source_file):
        """Test that an existing file is valid."""
        assert ValidationUtils.validate_source_file(source_file).is_valid

    def test_missing_file(self, temp_dir):
        """Test that a missing file is invalid."""
        result = ValidationUtils.validate_source_file(temp_dir / "absent.csv")

        assert not result.is_valid
        assert "does not exist" in result.errors[0].message

    def test_directory(self, temp_dir):
        """Test that a directory is not a valid source file."""
        result = ValidationUtils.validate_source_file(temp_dir)

        assert not result.is_valid
        assert "not a regular file" in result.errors[0].message

    def test_empty_path(self):
        """Test that an empty path is invalid."""
        result = ValidationUtils.validate_source_file("")

        assert not result.is_valid
        assert "cannot be empty" in result.errors[0].message


class TestValidateChunkSetDestination:
    """Tests for chunk set destination validation."""

    def test_new_destination(self, temp_dir):
        """Test a destination whose parent exists."""
        result = ValidationUtils.validate_chunk_set_destination(temp_dir / "data.chunked")

        assert result.is_valid
        assert result.warnings == []

    def test_existing_destination(self, temp_dir):
        """Test that an existing directory is rejected."""
        destination = temp_dir / "data.chunked"
        destination.mkdir()

        result = ValidationUtils.validate_chunk_set_destination(destination)

        assert not result.is_valid
        assert result.errors[0].type == ErrorType.DESTINATION_EXISTS

    def test_existing_file_destination(self, temp_dir):
        """Test that an existing file is rejected as well."""
        destination = temp_dir / "data.chunked"
        destination.write_bytes(b"")

        result = ValidationUtils.validate_chunk_set_destination(destination)

        assert result.errors[0].type == ErrorType.DESTINATION_EXISTS

    def test_missing_parents_warn(self, temp_dir):
        """Test that missing parent directories produce a warning."""
        result = ValidationUtils.validate_chunk_set_destination(temp_dir / "a" / "b" / "data.chunked")

        assert result.is_valid
        assert str(temp_dir) in result.warnings[0]

    def test_parent_is_a_file(self, temp_dir):
        """Test that a destination under a regular file is rejected."""
        blocker = temp_dir / "blocker"
        blocker.write_bytes(b"")

        result = ValidationUtils.validate_chunk_set_destination(blocker / "data.chunked")

        assert not result.is_valid
        assert result.errors[0].type == ErrorType.VALIDATION
        assert "not a directory" in result.errors[0].message
