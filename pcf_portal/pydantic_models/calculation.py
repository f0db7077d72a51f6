"""
Pydantic models for resolved emission totals following kkb_fastapi pattern.
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from pcf_portal.utils.constants import EMISSION_UNIT, ResolutionState, SharingStatus


class ResolvedEmission(BaseModel):
    """Total emissions of one record, or the reason there is no number."""

    state: ResolutionState = Field(
        ...,
        description="available, unavailable (sharing gate closed) or undetermined",
        examples=[ResolutionState.AVAILABLE],
    )
    value: Optional[Decimal] = Field(
        None,
        description="Rounded total in kg CO2e; null unless state is available",
        examples=[Decimal("12.50")],
    )
    display: str = Field(
        ...,
        description="Text to render in place of the figure",
        examples=["12.50 kg CO2e"],
    )
    unit: str = Field(EMISSION_UNIT, examples=[EMISSION_UNIT])
    source: Optional[str] = Field(
        None,
        description="override, reference or product",
        examples=["reference"],
    )
    sharing_status: Optional[SharingStatus] = Field(
        None, description="Sharing gate status for supplier line items"
    )

    @property
    def is_available(self) -> bool:
        return self.state == ResolutionState.AVAILABLE


class EmissionCategorySummary(BaseModel):
    """Subtotal of one record category."""

    category: str = Field(..., examples=["transport"])
    total: Decimal = Field(
        ...,
        description="Sum of the available figures in kg CO2e",
        examples=[Decimal("400.000")],
    )
    record_count: int = Field(..., examples=[3])
    withheld_count: int = Field(
        ...,
        description="Records whose figure is gated or undetermined",
        examples=[1],
    )


class ProductEmissionSummary(BaseModel):
    """Aggregated emissions of a product across BOM, transport and energy."""

    total: Decimal = Field(
        ...,
        description="Sum of all available figures in kg CO2e",
        examples=[Decimal("412.500")],
    )
    unit: str = Field(EMISSION_UNIT, examples=[EMISSION_UNIT])
    categories: list[EmissionCategorySummary]
    is_complete: bool = Field(
        ...,
        description="False when any record was withheld or undetermined",
    )
