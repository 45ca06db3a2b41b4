"""Errors raised while producing a RIPEMD-160 digest.

None of these are transient: they are reported once and end the run.
"""


class HashError(Exception):
    """Base class for all hashing errors."""


class InvalidUsage(HashError):
    """Wrong number or form of invocation arguments."""


class SourceUnavailable(HashError):
    """The named input could not be opened or read."""

    def __init__(self, filename, reason):
        self.filename = filename
        self.reason = reason
        super().__init__(f"{filename}: {reason}")


class AllocationFailure(HashError):
    """Memory for the message could not be allocated."""

    def __init__(self, capacity):
        self.capacity = capacity
        super().__init__(f"unable to allocate {capacity} bytes")
