"""
Translation of service results into HTTP responses.
"""

from fastapi import HTTPException, status

from portal.services.base import ErrorCode, ServiceResult

ERROR_STATUS = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.DEPENDENT_WRITE_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.VALIDATION_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.INSUFFICIENT_PERMISSIONS: status.HTTP_403_FORBIDDEN,
    ErrorCode.INSUFFICIENT_CAPACITY: status.HTTP_409_CONFLICT,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def unwrap_result(result: ServiceResult):
    """Return the result data or raise the matching HTTPException."""
    if result.is_success:
        return result.data
    error = result.error
    raise HTTPException(
        status_code=ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=error.to_dict(),
    )
