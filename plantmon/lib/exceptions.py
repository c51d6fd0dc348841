"""Custom exceptions for the plant monitor.

Collaborator failures (storage, notification delivery) raise these so the
pipelines can report them per step instead of aborting a whole run.
"""


class PlantMonitorError(Exception):
    """Base exception for all application errors."""


class DatabaseError(PlantMonitorError):
    """Base exception for database-related errors."""


class DatabaseNotConnectedError(DatabaseError):
    """Raised when attempting database operations without a connection."""

    def __init__(self, message: str = "Database not connected") -> None:
        super().__init__(message)


class NotificationError(PlantMonitorError):
    """Raised when a notification backend rejects a delivery."""
