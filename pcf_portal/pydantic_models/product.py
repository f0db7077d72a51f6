"""
Pydantic models for products and their emission traces.
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pcf_portal.pydantic_models.emission_reference import OverrideFactorPydModel


class ProductPydModel(BaseModel):
    """Product as returned by the backend."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    supplier: Optional[int] = Field(None, description="ID of the supplier company")
    supplier_name: Optional[str] = None
    manufacturer_name: Optional[str] = None
    manufacturer_country: Optional[str] = None
    emission_total: Optional[Decimal] = Field(
        None,
        allow_inf_nan=True,
        description="Total emissions per reference unit (kg CO2e)",
    )
    emission_total_biogenic: Optional[Decimal] = None
    emission_total_non_biogenic: Optional[Decimal] = None
    override_factors: list[OverrideFactorPydModel] = Field(default_factory=list)
    description: Optional[str] = None
    sku: Optional[str] = None
    family: Optional[str] = None
    reference_impact_unit: Optional[str] = None
    pcf_calculation_method: Optional[str] = None
    is_public: bool = False


class EmissionSplit(BaseModel):
    """Biogenic / non-biogenic split of a subtotal."""

    biogenic: Decimal = Decimal("0")
    non_biogenic: Decimal = Decimal("0")


class Mention(BaseModel):
    """Notification attached to an emission trace node."""

    mention_class: str = Field(..., examples=["Warning"])
    message: str


class EmissionTraceChild(BaseModel):
    """Sub-component of an emission trace."""

    emission_trace: "EmissionTracePydModel"
    quantity: Decimal


class EmissionTracePydModel(BaseModel):
    """Recursive breakdown of a product's emissions."""

    label: str
    reference_impact_unit: Optional[str] = None
    methodology: Optional[str] = None
    emissions_subtotal: dict[str, EmissionSplit] = Field(default_factory=dict)
    children: list[EmissionTraceChild] = Field(default_factory=list)
    mentions: list[Mention] = Field(default_factory=list)
    total: Decimal = Decimal("0")


EmissionTraceChild.model_rebuild()
