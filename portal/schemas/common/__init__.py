from portal.schemas.common.base import BaseSchema, BaseCreateSchema, BaseResponseSchema

__all__ = ["BaseSchema", "BaseCreateSchema", "BaseResponseSchema"]
