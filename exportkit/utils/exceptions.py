"""
Custom exception definitions.

This module defines the exception hierarchy for exportkit errors. Every
error is terminal for the operation that raised it; none are retried.
"""

from typing import Optional


class ExportKitError(Exception):
    """
    Base exception for all exportkit errors.

    Carries a human-readable message plus an optional dictionary of
    context (paths, error codes) that is appended when formatted.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize exportkit error.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class SourceNotFoundError(ExportKitError):
    """Raised when a required source file does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Source file not found: '{path}'", {'path': path})
        self.path = path


class FileIOError(ExportKitError):
    """
    Raised when opening, reading, writing or stat-ing a file fails.

    The OS error code is preserved so that callers can report the
    underlying cause.
    """

    def __init__(self, path: str, errno: Optional[int] = None, reason: str = ""):
        """
        Initialize file I/O error.

        Args:
            path: Path of the file that could not be accessed
            errno: Optional OS error code
            reason: Optional description of the failure
        """
        message = f"File I/O error on '{path}'"
        if reason:
            message += f": {reason}"

        details = {'path': path}
        if errno is not None:
            details['errno'] = errno

        super().__init__(message, details)
        self.path = path
        self.errno = errno

    @classmethod
    def from_os_error(cls, path: str, error: OSError) -> 'FileIOError':
        """Build a FileIOError from an OSError raised for ``path``."""
        return cls(path, error.errno, error.strerror or str(error))


class OverwriteConflictError(ExportKitError):
    """
    Raised when a generator target exists but was not generated by us.

    The target lacks the generator token, so it is assumed to be
    hand-written and is never overwritten.
    """

    def __init__(self, path: str):
        super().__init__(
            f"Target file '{path}' already exists and was not generated by exportkit",
            {'path': path},
        )
        self.path = path


class ParseError(ExportKitError):
    """Raised when a source file contains malformed attribute syntax."""

    def __init__(self, message: str, path: str = "", line: Optional[int] = None):
        details = {}
        if path:
            details['path'] = path
        if line is not None:
            details['line'] = line

        super().__init__(message, details)
        self.path = path
        self.line = line


class ConfigurationError(ExportKitError):
    """Raised when a configuration file cannot be interpreted."""

    def __init__(self, message: str, config_file: Optional[str] = None):
        details = {}
        if config_file is not None:
            details['config_file'] = config_file

        super().__init__(message, details)
        self.config_file = config_file
