"""Custom exception classes and error handling utilities."""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from loguru import logger


class AlbookError(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(AlbookError):
    """Raised when an exercise id does not exist."""

    @classmethod
    def for_exercise(cls, exercise_id: int) -> "NotFoundError":
        return cls("Exercise not found", {"id": exercise_id})


class ValidationError(AlbookError):
    """Data validation errors (blank title, bad page number, ...)."""
    pass


class StorageError(AlbookError):
    """Persistence layer failure."""
    pass


class ReviewConflictError(AlbookError):
    """Another review of the same exercise was committed first."""
    pass


def handle_not_found_error(error: NotFoundError) -> HTTPException:
    """Handle lookups of unknown exercises."""
    logger.warning(f"Not found: {error.message} {error.details}")
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=error.message,
    )


def handle_validation_error(error: ValidationError) -> HTTPException:
    """Handle validation errors."""
    logger.warning(f"Validation error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "message": error.message,
            "details": error.details
        }
    )


def handle_review_conflict_error(error: ReviewConflictError) -> HTTPException:
    """Handle a review that lost the race against a concurrent one."""
    logger.warning(f"Review conflict: {error.message} {error.details}")
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=error.message,
    )


def handle_storage_error(error: StorageError) -> HTTPException:
    """Handle database errors and return appropriate HTTP response."""
    logger.error(f"Storage error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Database operation failed. Please try again later."
    )


def to_http_exception(error: AlbookError) -> HTTPException:
    """Translate a domain error into the matching HTTP exception."""
    if isinstance(error, NotFoundError):
        return handle_not_found_error(error)
    if isinstance(error, ValidationError):
        return handle_validation_error(error)
    if isinstance(error, ReviewConflictError):
        return handle_review_conflict_error(error)
    if isinstance(error, StorageError):
        return handle_storage_error(error)
    logger.error(f"Unhandled application error: {error.message}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=error.message,
    )
