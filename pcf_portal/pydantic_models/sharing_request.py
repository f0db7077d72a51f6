"""
Pydantic models for product sharing requests.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pcf_portal.utils.constants import SharingStatus


class ProductSharingRequestPydModel(BaseModel):
    """Request by one company to see another company's product emissions."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    product_name: Optional[str] = None
    status: SharingStatus
    created_at: Optional[datetime] = None
    product: int
    requester: int
    requester_name: Optional[str] = Field(
        None, description="Name of the requesting company"
    )


class SharingDecisionRequest(BaseModel):
    """Bulk approve / deny payload."""

    ids: list[int] = Field(..., min_length=1)


class SharingDecisionResponse(BaseModel):
    success: bool


class SharingRequestCounts(BaseModel):
    """Number of sharing requests per status."""

    pending: int = 0
    accepted: int = 0
    rejected: int = 0
