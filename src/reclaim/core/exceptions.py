"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/exceptions.py
Exception types raised by the scan engine.
"""


class ReclaimError(Exception):
    """Base class for all reclaim errors."""


class ScanError(ReclaimError):
    """
    Fatal scan-level error: the scan could not start at all
    (root missing, not a directory, or unreadable).
    Per-file problems are never reported through this exception.
    """


class FileChangedError(OSError):
    """File content length no longer matches the size recorded by the walker."""

    def __init__(self, path: str, expected: int, actual: int):
        super().__init__(f"File changed during scan: {path} (expected {expected} bytes, read {actual})")
        self.path = path
        self.expected = expected
        self.actual = actual
