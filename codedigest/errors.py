"""
Exceptions raised by codedigest.

Per-file problems found while walking a tree are not raised; they are
recorded in the run statistics instead. Everything here is fatal for the
call that raises it.
"""
from typing import Optional


class CodeDigestError(Exception):
    """Base class for all codedigest errors."""


class IgnoreFileError(CodeDigestError):
    """An ignore file exists but could not be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Error reading ignore file {path}: {reason}")
        self.path = path
        self.reason = reason


class NotInitializedError(CodeDigestError):
    """An operation was called before the ignore rules were loaded."""

    def __init__(self, message: str = "CodeDigest not initialized. Call initialize() first."):
        super().__init__(message)


class TraversalError(CodeDigestError):
    """The root of a traversal could not be listed."""

    def __init__(self, path: str, reason: str, stats: Optional[object] = None):
        super().__init__(f"Cannot read directory {path}: {reason}")
        self.path = path
        self.reason = reason
        self.stats = stats


class BinaryFileError(CodeDigestError):
    """A text stream was requested for a binary file."""

    def __init__(self, path: str):
        super().__init__(f"Binary file detected: {path}")
        self.path = path
