"""Placeholder encryption: Base64 with an artificial delay."""

import base64
import binascii
import time
from ..types import Decryptor, Encryptor


# Bytes processed per millisecond of simulated work. Smaller is slower; at
# 222 a 554 MiB file takes close to an hour to encrypt in one piece.
DEFAULT_DELAY_DIVISOR = 222


def simulate_slow_algorithm(content_length: int, delay_divisor: int) -> None:
    """Sleep content_length / delay_divisor milliseconds (no-op when divisor is 0)."""
    if delay_divisor <= 0:
        return
    time.sleep((content_length // delay_divisor) / 1000)


class DummyEncryptor(Encryptor):
    """Stand-in for a real cipher: Base64-encodes its input, slowly."""

    def __init__(self, delay_divisor: int = DEFAULT_DELAY_DIVISOR):
        self.delay_divisor = delay_divisor

    def encrypt(self, unencrypted: bytes) -> bytes:
        simulate_slow_algorithm(len(unencrypted), self.delay_divisor)
        return base64.b64encode(unencrypted)


class DummyDecryptor(Decryptor):
    """Inverse of DummyEncryptor."""

    def __init__(self, delay_divisor: int = DEFAULT_DELAY_DIVISOR):
        self.delay_divisor = delay_divisor

    def decrypt(self, encrypted: bytes) -> bytes:
        """
        Base64-decode the input.

        Raises:
            ValueError: If the input is not valid Base64
        """
        simulate_slow_algorithm(len(encrypted), self.delay_divisor)
        try:
            return base64.b64decode(encrypted, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Input is not valid Base64: {e}") from e
