"""
Normalized error payloads.
"""
from typing import Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """One field or non-field error reported by the backend."""

    attr: Optional[str] = Field(None, examples=["non_field_errors"])
    code: Optional[str] = Field(None, examples=["invalid"])
    detail: str = Field(..., examples=["This product is already in the BOM."])


class ApiErrorResponse(BaseModel):
    """The single error shape this service returns to its callers."""

    detail: str
    errors: list[ErrorDetail] = Field(default_factory=list)
