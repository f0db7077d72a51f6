"""
Pydantic models for bill-of-materials line items.
"""
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pcf_portal.pydantic_models.calculation import ResolvedEmission
from pcf_portal.pydantic_models.product import ProductPydModel
from pcf_portal.utils.constants import SharingStatus


class LineItemPydModel(BaseModel):
    """A quantity of a supplied product consumed by a parent product."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    quantity: Decimal = Field(..., description="Quantity of the supplied product")
    line_item_product: ProductPydModel
    parent_product: Optional[int] = None
    product_sharing_request_status: SharingStatus = Field(
        SharingStatus.NOT_REQUESTED,
        description="Whether the supplier has shared the product's emissions",
    )

    @field_validator("product_sharing_request_status", mode="before")
    @classmethod
    def default_missing_status(cls, value: Any) -> Any:
        if value is None or value == "":
            return SharingStatus.NOT_REQUESTED
        return value


class LineItemCreate(BaseModel):
    """Request model for adding a material to the BOM."""

    quantity: str = Field("1", description="Quantity as typed by the user", examples=["5"])
    line_item_product_id: int

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        return value


class LineItemUpdate(BaseModel):
    """Request model for editing a BOM line quantity."""

    quantity: str = Field(..., examples=["2.5"])

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        return value


class LineItemView(BaseModel):
    """BOM line with its emission resolved behind the sharing gate."""

    id: int
    product_id: int
    product_name: str
    manufacturer_name: str
    supplier_name: str
    supplier_id: Optional[int] = None
    quantity: Decimal
    reference_impact_unit: Optional[str] = None
    product_sharing_request_status: SharingStatus
    emission: ResolvedEmission
