"""Storage engines."""

from .chunked_file_service import ChunkedFileService, identity_transform
from .metadata_manager import MetadataManager
from .simple_file_service import SimpleFileService

__all__ = ["ChunkedFileService", "MetadataManager", "SimpleFileService", "identity_transform"]
