"""Validation utilities for engine parameters and paths."""

import os
from pathlib import Path
from typing import List
from ..types import PathLike, ValidationResult, ValidationError, ErrorType


# Chunk sizes outside this window still work but are unlikely to be intended
SMALL_CHUNK_WARNING_BYTES = 64 * 1024
LARGE_CHUNK_WARNING_BYTES = 512 * 1024 * 1024


class ValidationUtils:
    """Utility class for validating engine inputs."""

    @staticmethod
    def validate_chunk_size(size: int) -> ValidationResult:
        """
        Validate a chunk size parameter.

        Args:
            size: Chunk size in bytes

        Returns:
            ValidationResult with validation details
        """
        errors: List[ValidationError] = []
        warnings: List[str] = []

        if isinstance(size, bool) or not isinstance(size, int):
            errors.append(ValidationError(
                type=ErrorType.VALIDATION,
                message=f"Chunk size must be an integer, got {type(size).__name__}",
                location="chunk_size"
            ))
        elif size <= 0:
            errors.append(ValidationError(
                type=ErrorType.VALIDATION,
                message="Chunk size must be positive",
                location="chunk_size"
            ))
        elif size < SMALL_CHUNK_WARNING_BYTES:
            warnings.append("Chunk size is very small (< 64KB). Per-chunk overhead may dominate.")
        elif size > LARGE_CHUNK_WARNING_BYTES:
            warnings.append("Chunk size is very large (> 512MB). Few chunks means little parallelism.")

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )

    @staticmethod
    def validate_source_file(path: PathLike) -> ValidationResult:
        """
        Validate that a path names a readable regular file.

        Args:
            path: File path to validate

        Returns:
            ValidationResult with validation details
        """
        errors: List[ValidationError] = []
        file_path = Path(path)

        if not str(path):
            errors.append(ValidationError(ErrorType.VALIDATION, "File path cannot be empty", "path"))
        elif not file_path.exists():
            errors.append(ValidationError(ErrorType.VALIDATION, f"File does not exist: {path}", "path"))
        elif not file_path.is_file():
            errors.append(ValidationError(ErrorType.VALIDATION, f"Path is not a regular file: {path}", "path"))
        elif not os.access(file_path, os.R_OK):
            errors.append(ValidationError(ErrorType.VALIDATION, f"File is not readable: {path}", "path"))

        return ValidationResult(is_valid=len(errors) == 0, errors=errors, warnings=[])

    @staticmethod
    def validate_chunk_set_destination(path: PathLike) -> ValidationResult:
        """
        Validate that a chunk set can be created at a path.

        The destination must not exist yet; its nearest existing ancestor
        must be a writable directory.

        Args:
            path: Chunk set directory to validate

        Returns:
            ValidationResult with validation details
        """
        errors: List[ValidationError] = []
        warnings: List[str] = []
        destination = Path(path)

        if destination.exists():
            errors.append(ValidationError(
                type=ErrorType.DESTINATION_EXISTS,
                message=f"Destination already exists: {path}",
                location="path"
            ))
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        ancestor = destination.absolute().parent
        while not ancestor.exists() and ancestor != ancestor.parent:
            ancestor = ancestor.parent

        if not ancestor.is_dir():
            errors.append(ValidationError(
                type=ErrorType.VALIDATION,
                message=f"Parent path is not a directory: {ancestor}",
                location="path"
            ))
        elif not os.access(ancestor, os.W_OK):
            errors.append(ValidationError(
                type=ErrorType.VALIDATION,
                message=f"Parent directory is not writable: {ancestor}",
                location="path"
            ))
        elif ancestor != destination.absolute().parent:
            warnings.append(f"Missing parent directories will be created under {ancestor}")

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )
