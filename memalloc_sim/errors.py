# errors.py
# Exceptions for contract violations. Expected outcomes such as a failed
# allocation are reported through FailureReason, not raised.

import enum


class MemAllocError(Exception):
    """Base class for all memalloc_sim errors."""


class InvalidSizeError(MemAllocError, ValueError):
    """Raised when a memory size or request size is not a positive integer."""


class CommandParseError(MemAllocError, ValueError):
    def __init__(self, message, lineno=None):
        self.lineno = lineno
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)


class InvariantViolation(MemAllocError, AssertionError):
    """The block list no longer partitions the address space correctly."""


class FailureReason(enum.Enum):
    INSUFFICIENT_MEMORY = "Insufficient Memory"
    PROCESS_NOT_FOUND = "Process Not Found"
    DUPLICATE_PROCESS = "Process Already Allocated"

    def __str__(self):
        return self.value
