"""Pytest configuration and fixtures."""

import pytest
import tempfile
from pathlib import Path
from parallel_chunks.models import ChunkLayout


SMALL_CHUNK_SIZE = 8


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def small_layout():
    """Layout with tiny chunks so multi-chunk behavior needs only a few bytes."""
    return ChunkLayout(chunk_size_bytes=SMALL_CHUNK_SIZE)


@pytest.fixture
def indexed_content():
    """
    Content whose every chunk (at SMALL_CHUNK_SIZE) is filled with its own index.

    Chunk i is eight copies of byte i, so a transform can tell which chunk
    it was given from the first byte.
    """
    return b"".join(bytes([index]) * SMALL_CHUNK_SIZE for index in range(6))


@pytest.fixture
def binary_content():
    """Arbitrary binary content spanning several small chunks plus a remainder."""
    return bytes(range(256)) * 3 + b"\x00tail\xff"


@pytest.fixture
def source_file(temp_dir):
    """A plain source file to encrypt."""
    path = temp_dir / "stories.csv"
    path.write_bytes(b"id,title\n" + b"".join(f"{i},story {i}\n".encode() for i in range(10)))
    return path
