"""Custom exception classes for the application."""

from typing import Any, Optional


class RecruitCRMException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class StorageError(RecruitCRMException):
    """The candidate store failed to create, fetch or update a record."""

    pass


class ConflictError(RecruitCRMException):
    """Resource conflict (e.g., a concurrent writer changed the row first)."""

    pass
