"""Common Pydantic schemas shared across the API."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for request and response bodies.

    Attributes are snake_case in Python and camelCase on the wire; either form
    is accepted on input. Response models read straight from ORM objects.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str = Field(description="Human-readable outcome")


class ErrorDetail(BaseModel):
    code: str = Field(description="Error code for programmatic handling")
    message: str = Field(description="Human-readable error message")
    path: Optional[str] = None
    method: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error response model."""

    error: ErrorDetail
