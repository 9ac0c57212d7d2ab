"""
Base service class providing common functionality for all services.
"""

from typing import Optional, Dict, Any
from abc import ABC

from pydantic import ValidationError as PydanticValidationError

from portal.core.exceptions import BaseAppException, ErrorCode as AppErrorCode
from portal.core.logging import get_logger
from portal.repositories.record_store import RecordStore
from portal.services.base.service_result import (
    ServiceResult,
    ServiceError,
    ErrorCode,
    ErrorSeverity,
)


# Domain exception codes that callers are allowed to see
_APP_CODE_MAPPING: Dict[AppErrorCode, ErrorCode] = {
    AppErrorCode.RESOURCE_NOT_FOUND: ErrorCode.NOT_FOUND,
    AppErrorCode.INVALID_TRANSITION: ErrorCode.INVALID_TRANSITION,
    AppErrorCode.DEPENDENT_WRITE_FAILED: ErrorCode.DEPENDENT_WRITE_FAILED,
    AppErrorCode.VALIDATION_ERROR: ErrorCode.VALIDATION_ERROR,
    AppErrorCode.AUTHORIZATION_FAILED: ErrorCode.INSUFFICIENT_PERMISSIONS,
    AppErrorCode.INSUFFICIENT_PERMISSIONS: ErrorCode.INSUFFICIENT_PERMISSIONS,
    AppErrorCode.INSUFFICIENT_CAPACITY: ErrorCode.INSUFFICIENT_CAPACITY,
    AppErrorCode.ROOM_CONFLICT: ErrorCode.CONFLICT,
    AppErrorCode.EVENT_LINK_CONFLICT: ErrorCode.CONFLICT,
}

# Codes that describe a refused request rather than a malfunction
_EXPECTED_CODES = {
    ErrorCode.NOT_FOUND,
    ErrorCode.INVALID_TRANSITION,
    ErrorCode.VALIDATION_ERROR,
    ErrorCode.INSUFFICIENT_PERMISSIONS,
    ErrorCode.INSUFFICIENT_CAPACITY,
    ErrorCode.CONFLICT,
}


class BaseService(ABC):
    """
    Base service with common behaviors:
    - Shared logger and record store
    - Consistent error handling via ServiceResult
    """

    def __init__(self, store: RecordStore):
        """
        Initialize base service.

        Args:
            store: Record store used for every read and write
        """
        self.store: RecordStore = store
        self._logger = get_logger(self.__class__.__name__)

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert exception to a ServiceResult failure with logging.

        Args:
            exception: The caught exception
            operation: Description of the operation that failed
            entity_ref: Reference to the entity involved (ID, name, etc.)
            additional_context: Extra context for logging/debugging

        Returns:
            ServiceResult with failure status and error details
        """
        error_code = self._map_exception_to_error_code(exception)
        expected = error_code in _EXPECTED_CODES

        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
            "error_code": error_code.value,
        }
        if additional_context:
            context.update(additional_context)

        if expected:
            self._logger.warning(f"{operation} refused: {exception}", extra=context)
        else:
            self._logger.error(
                f"Error during {operation}: {exception}",
                exc_info=True,
                extra=context,
            )

        if isinstance(exception, BaseAppException):
            message = exception.message
            details = dict(exception.details)
        else:
            message = f"Failed to {operation}"
            details = {"error": str(exception)}
        details["entity_ref"] = context["entity_ref"]

        return ServiceResult.failure(
            ServiceError(
                code=error_code,
                message=message,
                details=details,
                severity=ErrorSeverity.WARNING if expected else ErrorSeverity.CRITICAL,
            )
        )

    def _map_exception_to_error_code(self, exception: Exception) -> ErrorCode:
        """
        Map exception types to appropriate error codes.

        Args:
            exception: The exception to map

        Returns:
            Appropriate ErrorCode for the exception
        """
        if isinstance(exception, BaseAppException):
            return _APP_CODE_MAPPING.get(exception.error_code, ErrorCode.INTERNAL_ERROR)

        exception_mapping = {
            PydanticValidationError: ErrorCode.VALIDATION_ERROR,
            ValueError: ErrorCode.VALIDATION_ERROR,
            PermissionError: ErrorCode.INSUFFICIENT_PERMISSIONS,
        }

        for exc_type, error_code in exception_mapping.items():
            if isinstance(exception, exc_type):
                return error_code

        return ErrorCode.INTERNAL_ERROR

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def _log_operation(
        self,
        operation: str,
        entity_ref: Optional[Any] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log service operation with standardized format.

        Args:
            operation: Description of the operation
            entity_ref: Reference to the entity involved
            extra: Additional context to log
        """
        context = {"entity_ref": str(entity_ref) if entity_ref else None}
        if extra:
            context.update(extra)

        self._logger.info(f"Operation: {operation}", extra=context)
