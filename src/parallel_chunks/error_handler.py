"""Error handling implementation for Parallel Chunks."""

import logging
from pathlib import Path
from typing import Any, Optional
from .types import (
    ErrorResponse,
    ErrorType,
    PathLike,
    ProcessingError,
    ValidationError,
    ValidationResult
)
from .utils.validation import ValidationUtils


class ErrorHandler:
    """
    Error handler for chunked storage operations.

    Turns engine exceptions into user-facing recovery suggestions and
    validates operation parameters before any work starts. It never retries
    or repairs anything itself.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            logger: Optional logger instance for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)

    def handle_processing_error(self, error: ProcessingError) -> ErrorResponse:
        """
        Describe how a caller can recover from a processing error.

        Args:
            error: ProcessingError to handle

        Returns:
            ErrorResponse with recovery information
        """
        self.logger.error(f"Processing error: {error.error_type.value} - {error}")

        handlers = {
            ErrorType.MISSING_METADATA: self._handle_missing_metadata,
            ErrorType.CORRUPT_METADATA: self._handle_corrupt_metadata,
            ErrorType.MISSING_CHUNK: self._handle_missing_chunk,
            ErrorType.DESTINATION_EXISTS: self._handle_destination_exists,
            ErrorType.TRANSFORM: self._handle_transform_error,
            ErrorType.IO: self._handle_io_error,
            ErrorType.VALIDATION: self._handle_validation_error,
        }
        handler = handlers.get(error.error_type)
        if handler is None:
            return ErrorResponse(
                can_recover=False,
                suggested_action="Unknown error type. Please check logs and retry.",
                partial_results=None
            )
        return handler(error)

    def _handle_missing_metadata(self, error: ProcessingError) -> ErrorResponse:
        return ErrorResponse(
            can_recover=False,
            suggested_action="No chunk count record was found. Check that the path points "
                             "to a chunk set directory written by a chunked write.",
            partial_results=None
        )

    def _handle_corrupt_metadata(self, error: ProcessingError) -> ErrorResponse:
        return ErrorResponse(
            can_recover=False,
            suggested_action="The chunk count record is damaged. The chunk set was probably "
                             "left behind by an interrupted write; delete it and write it again.",
            partial_results=None
        )

    def _handle_missing_chunk(self, error: ProcessingError) -> ErrorResponse:
        return ErrorResponse(
            can_recover=False,
            suggested_action="One or more chunks are missing. The chunk set is incomplete; "
                             "delete it and write it again.",
            partial_results=self._failed_chunks(error)
        )

    def _handle_destination_exists(self, error: ProcessingError) -> ErrorResponse:
        return ErrorResponse(
            can_recover=True,
            suggested_action="The destination already exists. Remove it or choose another "
                             "path; existing chunk sets are never overwritten.",
            partial_results=error.context.get("path")
        )

    def _handle_transform_error(self, error: ProcessingError) -> ErrorResponse:
        operation = error.context.get("operation")
        if operation == "write":
            action = ("The transform failed while writing. Chunks written before the failure "
                      "were left on disk; delete the chunk set before retrying.")
            partial = error.context.get("written_chunks")
        else:
            action = ("The transform failed while reading. Check that the chunk set was written "
                      "with the inverse of this transform.")
            partial = self._failed_chunks(error)
        return ErrorResponse(can_recover=False, suggested_action=action, partial_results=partial)

    def _handle_io_error(self, error: ProcessingError) -> ErrorResponse:
        return ErrorResponse(
            can_recover=True,
            suggested_action="Check file permissions, available disk space, and directory access, "
                             "then retry. Partially written chunk sets must be deleted first.",
            partial_results=error.context.get("written_chunks")
        )

    def _handle_validation_error(self, error: ProcessingError) -> ErrorResponse:
        problems = error.context.get("errors") or [str(error)]
        return ErrorResponse(
            can_recover=True,
            suggested_action="Fix the reported problems and retry: " + "; ".join(problems),
            partial_results=None
        )

    @staticmethod
    def _failed_chunks(error: ProcessingError) -> Optional[Any]:
        if "failed_chunks" in error.context:
            return error.context["failed_chunks"]
        if "index" in error.context:
            return [error.context["index"]]
        return None

    def validate_chunk_size(self, size: int) -> ValidationResult:
        """
        Validate chunk size parameter.

        Args:
            size: Chunk size in bytes

        Returns:
            ValidationResult with validation details
        """
        result = ValidationUtils.validate_chunk_size(size)
        for warning in result.warnings:
            self.logger.warning(warning)
        return result

    def validate_source_file(self, path: PathLike) -> ValidationResult:
        """Validate a file that is about to be read whole."""
        return self._safe_validate(ValidationUtils.validate_source_file, path)

    def validate_chunk_set_destination(self, path: PathLike) -> ValidationResult:
        """Validate a chunk set directory that is about to be written."""
        result = self._safe_validate(ValidationUtils.validate_chunk_set_destination, path)
        for warning in result.warnings:
            self.logger.warning(warning)
        return result

    def _safe_validate(self, validator, path: PathLike) -> ValidationResult:
        try:
            return validator(path)
        except (OSError, ValueError) as e:
            self.logger.error(f"Unexpected error validating {path}: {e}")
            return ValidationResult(
                is_valid=False,
                errors=[ValidationError(
                    type=ErrorType.VALIDATION,
                    message=f"Invalid path {Path(path)}: {e}",
                    location="path"
                )],
                warnings=[]
            )
