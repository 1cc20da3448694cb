"""Placeholder chunk transforms."""

from .dummy import DEFAULT_DELAY_DIVISOR, DummyDecryptor, DummyEncryptor, simulate_slow_algorithm

__all__ = ["DEFAULT_DELAY_DIVISOR", "DummyDecryptor", "DummyEncryptor", "simulate_slow_algorithm"]
