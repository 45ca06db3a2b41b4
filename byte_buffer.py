"""Growable, append-only byte container used to hold a message in memory.

The capacity starts small and doubles whenever an append would overflow
it, so appends are amortized O(1).
"""
import logging
import os

from ripemd_errors import AllocationFailure, SourceUnavailable

logger = logging.getLogger(__name__)

INITIAL_BUFFER_CAPACITY = 5


class ByteBuffer:

    def __init__(self):
        """Create an empty buffer with the initial capacity."""
        self.data = bytearray(INITIAL_BUFFER_CAPACITY)
        self.length = 0
        self.capacity = INITIAL_BUFFER_CAPACITY

    @classmethod
    def from_bytes(cls, source):
        """Bulk-load source into a new buffer.

        The capacity ends up where repeated add_byte calls would leave it.
        """
        buffer = cls()
        capacity = buffer.capacity
        while capacity < len(source):
            capacity *= 2
        buffer._grow(capacity)
        buffer.data[:len(source)] = source
        buffer.length = len(source)
        return buffer

    def _grow(self, capacity):
        if capacity == self.capacity:
            return
        try:
            self.data.extend(bytes(capacity - len(self.data)))
        except MemoryError as e:
            raise AllocationFailure(capacity) from e
        self.capacity = capacity

    def add_byte(self, b):
        """Append a single byte (0-255), doubling the capacity when full."""
        if not 0 <= b <= 0xff:
            raise ValueError(f"Byte value out of range: {b}")
        if self.length >= self.capacity:
            self._grow(self.capacity * 2)
        self.data[self.length] = b
        self.length += 1

    def __len__(self):
        return self.length

    def __getitem__(self, key):
        if isinstance(key, slice):
            start, stop, step = key.indices(self.length)
            return bytes(self.data[start:stop:step])
        if key < 0:
            key += self.length
        if not 0 <= key < self.length:
            raise IndexError("ByteBuffer index out of range")
        return self.data[key]

    def __iter__(self):
        return iter(self.data[:self.length])

    def __bytes__(self):
        return bytes(self.data[:self.length])

    def __repr__(self):
        return f"ByteBuffer(length={self.length}, capacity={self.capacity})"


def read_file(filename):
    """Read the whole of filename into a new ByteBuffer.

    Raises SourceUnavailable if the file cannot be opened or read, and
    AllocationFailure if its contents do not fit in memory.
    """
    try:
        with open(filename, "rb") as f:
            contents = f.read()
    except OSError as e:
        raise SourceUnavailable(filename, e.strerror or str(e)) from e
    except MemoryError as e:
        raise AllocationFailure(os.path.getsize(filename)) from e
    logger.debug("Read %d bytes from %s", len(contents), filename)
    return ByteBuffer.from_bytes(contents)
