"""Bounds-checked little-endian reads over a byte buffer.

Every read that would cross the end of the buffer raises ``TruncatedError``
labelled with the decoder stage, so callers never have to check lengths
themselves.
"""

import struct

import numpy as np
from numpy.typing import NDArray

from wtcodec.errors import TruncatedError

_U16 = struct.Struct("<H")
_I16 = struct.Struct("<h")


class ByteReader:
    def __init__(self, buffer: bytes, stage: str = "framepack") -> None:
        self._buffer = memoryview(buffer)
        self._position = 0
        self._stage = stage

    @property
    def position(self) -> int:
        return self._position

    @property
    def remaining(self) -> int:
        """Number of unread bytes."""
        return len(self._buffer) - self._position

    def can_read(self, count: int) -> bool:
        return 0 <= count <= self.remaining

    def _require(self, count: int, what: str) -> None:
        if not self.can_read(count):
            raise TruncatedError(
                f"truncated reading {what} (need {count} bytes at offset {self._position}, "
                f"{self.remaining} left)",
                stage=self._stage,
            )

    def peek(self, count: int, what: str = "bytes") -> bytes:
        """Return the next ``count`` bytes without advancing."""
        self._require(count, what)
        return bytes(self._buffer[self._position : self._position + count])

    def read_bytes(self, count: int, what: str = "bytes") -> bytes:
        data = self.peek(count, what)
        self._position += count
        return data

    def read_u16(self, what: str = "uint16") -> int:
        self._require(2, what)
        (value,) = _U16.unpack_from(self._buffer, self._position)
        self._position += 2
        return value

    def read_i16(self, what: str = "int16") -> int:
        self._require(2, what)
        (value,) = _I16.unpack_from(self._buffer, self._position)
        self._position += 2
        return value

    def read_u16_array(self, count: int, what: str = "uint16 array") -> NDArray[np.uint16]:
        """Read ``count`` consecutive little-endian uint16 values."""
        return np.frombuffer(self.read_bytes(2 * count, what), dtype="<u2").astype(np.uint16)

    def read_i16_array(self, count: int, what: str = "int16 array") -> NDArray[np.int16]:
        """Read ``count`` consecutive little-endian int16 values."""
        return np.frombuffer(self.read_bytes(2 * count, what), dtype="<i2").astype(np.int16)
