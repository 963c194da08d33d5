"""
Base Schema Classes for Pydantic Models

RULE: All schemas that read from ORM rows (`from_attributes=True`) MUST inherit
from BaseResponseSchema.
"""

from pydantic import BaseModel, ConfigDict


class BaseResponseSchema(BaseModel):
    """
    Base class for schemas that are built from ORM models.

    Usage:
        class PincodeZoneInfo(BaseResponseSchema):
            pincode: str
            zone: Optional[str] = None
    """
    model_config = ConfigDict(
        from_attributes=True,
        # Allow population by field name or alias
        populate_by_name=True,
    )


class BaseCreateSchema(BaseModel):
    """
    Base class for input schemas.

    Unknown fields are ignored for forward compatibility.
    """
    model_config = ConfigDict(
        extra='ignore',
    )
