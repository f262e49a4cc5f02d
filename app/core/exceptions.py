"""Custom exception hierarchy."""

from typing import Iterable, List, Optional


class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class DatabaseError(AppError):
    """Raised when a database operation fails."""
    pass


class StorageError(AppError):
    """Raised when object storage cannot return a file."""
    pass


class ValidationError(AppError):
    """Raised when input validation fails.

    ``invalid_ids`` lists every identifier that caused the rejection so the
    caller can report them back in one round trip.
    """

    def __init__(
        self,
        message: str,
        invalid_ids: Optional[Iterable[str]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, original_error=original_error)
        self.invalid_ids: List[str] = [str(i) for i in (invalid_ids or [])]


class ConflictError(AppError):
    """Raised when a script is not in the lifecycle state an operation needs."""
    pass


class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass


class PipelineError(AppError):
    """Base exception for pipeline errors."""
    pass


class ParseError(PipelineError):
    """Raised when a PDF or FDX document cannot be parsed."""
    pass


class DocumentNotFoundError(AppError):
    """Raised when a script is not found."""
    pass
