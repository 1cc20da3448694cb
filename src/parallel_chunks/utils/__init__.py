"""Utility functions for Parallel Chunks."""

from .validation import ValidationUtils

__all__ = ["ValidationUtils"]
