"""
Custom Exceptions for the Reservation Portal

This module defines custom exception classes used throughout the application
for better error handling and debugging.
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    OPERATION_FAILED = "OPERATION_FAILED"

    # Authorization
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Repository errors
    REPOSITORY_ERROR = "REPOSITORY_ERROR"

    # Reservation workflow errors
    INVALID_TRANSITION = "INVALID_TRANSITION"
    DEPENDENT_WRITE_FAILED = "DEPENDENT_WRITE_FAILED"
    NON_CRITICAL_WRITE_FAILED = "NON_CRITICAL_WRITE_FAILED"
    ROOM_CONFLICT = "ROOM_CONFLICT"
    EVENT_LINK_CONFLICT = "EVENT_LINK_CONFLICT"
    INSUFFICIENT_CAPACITY = "INSUFFICIENT_CAPACITY"

    # External service errors
    NOTIFICATION_FAILED = "NOTIFICATION_FAILED"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


# ========================================
# General Application Exceptions
# ========================================

class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        status_code: int = 422
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, error_code, details, status_code)


class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id is not None:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": str(resource_id) if resource_id is not None else None
        }
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND, details, 404)


class PermissionDeniedError(BaseAppException):
    """Exception raised when the caller lacks the reviewer privilege"""

    def __init__(
        self,
        message: str = "Insufficient permissions",
        identity: Optional[str] = None,
        role: Optional[str] = None
    ):
        details = {"identity": identity, "role": role}
        super().__init__(message, ErrorCode.INSUFFICIENT_PERMISSIONS, details, 403)


# ========================================
# Repository Exceptions
# ========================================

class RepositoryError(BaseAppException):
    """Exception raised when a record store operation fails"""

    def __init__(
        self,
        message: str = "Repository operation failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, ErrorCode.REPOSITORY_ERROR, details, 500)


class EntityNotFoundError(ResourceNotFoundError):
    """Exception raised by the record store when an id does not resolve"""


# ========================================
# Reservation Workflow Exceptions
# ========================================

class InvalidTransitionError(BaseAppException):
    """Exception raised when a decision is illegal for the current status"""

    def __init__(
        self,
        reservation_id: str,
        current_status: Optional[str],
        requested_status: str,
        message: Optional[str] = None
    ):
        if not message:
            message = (
                f"Cannot move reservation {reservation_id} "
                f"from '{current_status}' to '{requested_status}'"
            )
        details = {
            "reservation_id": reservation_id,
            "current_status": current_status,
            "requested_status": requested_status
        }
        super().__init__(message, ErrorCode.INVALID_TRANSITION, details, 409)


class DependentWriteFailedError(BaseAppException):
    """
    Exception raised when a write that depends on an earlier one fails.

    The earlier write has already been compensated when this is raised,
    unless ``compensated`` is False. ``original_error`` is the failed write.
    """

    def __init__(
        self,
        reservation_id: str,
        original_error: Exception,
        compensated: bool = True,
        message: Optional[str] = None
    ):
        self.original_error = original_error
        if not message:
            message = f"Failed to create event for reservation {reservation_id}: {original_error}"
        details = {
            "reservation_id": reservation_id,
            "original_error": str(original_error),
            "original_error_type": type(original_error).__name__,
            "compensated": compensated
        }
        super().__init__(message, ErrorCode.DEPENDENT_WRITE_FAILED, details, 502)


class NonCriticalWriteFailedError(BaseAppException):
    """Exception for writes whose failure is logged but never surfaced"""

    def __init__(
        self,
        message: str,
        entity: str,
        entity_id: Optional[Any] = None
    ):
        details = {"entity": entity, "entity_id": str(entity_id) if entity_id is not None else None}
        super().__init__(message, ErrorCode.NON_CRITICAL_WRITE_FAILED, details, 500)


class RoomConflictError(BaseAppException):
    """Exception raised when a room already hosts an overlapping approved reservation"""

    def __init__(
        self,
        room_id: Any,
        conflicting_ids: List[str],
        message: str = "Room already has an approved reservation in the same time window"
    ):
        details = {"room_id": room_id, "conflicting_reservations": conflicting_ids}
        super().__init__(message, ErrorCode.ROOM_CONFLICT, details, 409)


class EventLinkConflictError(BaseAppException):
    """Exception raised when an event or reservation is already linked elsewhere"""

    def __init__(
        self,
        reservation_id: str,
        event_id: str,
        linked_to: Optional[str],
        message: Optional[str] = None
    ):
        if not message:
            message = f"Event {event_id} is already linked to reservation {linked_to}"
        details = {
            "reservation_id": reservation_id,
            "event_id": event_id,
            "linked_to": linked_to
        }
        super().__init__(message, ErrorCode.EVENT_LINK_CONFLICT, details, 409)


class InsufficientCapacityError(BaseAppException):
    """Exception raised when there's insufficient capacity"""

    def __init__(
        self,
        message: str = "Insufficient capacity",
        requested: Optional[int] = None,
        available: Optional[int] = None
    ):
        details = {
            "requested": requested,
            "available": available
        }
        super().__init__(message, ErrorCode.INSUFFICIENT_CAPACITY, details, 409)


# ========================================
# External Service Exceptions
# ========================================

class NotificationFailedError(BaseAppException):
    """Exception raised when a notification could not be delivered"""

    def __init__(
        self,
        message: str = "Notification delivery failed",
        recipient: Optional[str] = None,
        channel: Optional[str] = None
    ):
        details = {"recipient": recipient, "channel": channel}
        super().__init__(message, ErrorCode.NOTIFICATION_FAILED, details, 502)


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "ValidationError",
    "ResourceNotFoundError",
    "PermissionDeniedError",
    "RepositoryError",
    "EntityNotFoundError",
    "InvalidTransitionError",
    "DependentWriteFailedError",
    "NonCriticalWriteFailedError",
    "RoomConflictError",
    "EventLinkConflictError",
    "InsufficientCapacityError",
    "NotificationFailedError",
]
