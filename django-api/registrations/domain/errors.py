"""Domain error codes for the registrations module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_REGISTRATION_ID = "INVALID_REGISTRATION_ID"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"
    INVALID_PARTY_SIZE = "INVALID_PARTY_SIZE"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    EVENT_CANCELLED = "EVENT_CANCELLED"
    DUPLICATE_REGISTRATION = "DUPLICATE_REGISTRATION"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    NOTIFICATION_FAILED = "NOTIFICATION_FAILED"


USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.EVENT_NOT_FOUND: "Event not found",
    ErrorCode.INVALID_EVENT_ID: "Invalid event ID format",
    ErrorCode.INVALID_REGISTRATION_ID: "Invalid registration ID format",
    ErrorCode.REGISTRATION_NOT_FOUND: "Registration not found",
    ErrorCode.INVALID_PARTY_SIZE: "Party size must be at least 1",
    ErrorCode.CAPACITY_EXCEEDED: "Event is at capacity",
    ErrorCode.EVENT_CANCELLED: "Cannot register for cancelled event",
    ErrorCode.DUPLICATE_REGISTRATION: "This email is already registered for this event",
    ErrorCode.VALIDATION_FAILED: "Invalid registration data",
    ErrorCode.STORAGE_UNAVAILABLE: "Service temporarily unavailable, please retry",
    ErrorCode.NOTIFICATION_FAILED: "Confirmation email could not be sent",
}


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message=USER_MESSAGES[ErrorCode.EVENT_NOT_FOUND],
        )
        self.event_id = event_id


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message=USER_MESSAGES[ErrorCode.INVALID_EVENT_ID],
        )


class InvalidRegistrationIdError(DomainError):
    """Raised when a registration ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_REGISTRATION_ID,
            message=USER_MESSAGES[ErrorCode.INVALID_REGISTRATION_ID],
        )


class RegistrationNotFoundError(DomainError):
    """Raised when a registration lookup by ID finds nothing."""

    def __init__(self, registration_id: str) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_NOT_FOUND,
            message=USER_MESSAGES[ErrorCode.REGISTRATION_NOT_FOUND],
        )
        self.registration_id = registration_id


class StorageUnavailableError(DomainError):
    """Raised when the datastore fails during an atomic operation.

    The operation was rolled back as a whole; the caller may retry.
    """

    def __init__(self, operation: str) -> None:
        super().__init__(
            code=ErrorCode.STORAGE_UNAVAILABLE,
            message=USER_MESSAGES[ErrorCode.STORAGE_UNAVAILABLE],
        )
        self.operation = operation
