"""
API v1 router.
"""

from fastapi import APIRouter

from portal.api.v1.endpoints import reservations, rooms

router = APIRouter(
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
        502: {"description": "Dependent Write Failed"},
    }
)

router.include_router(reservations.router)
router.include_router(rooms.router)
