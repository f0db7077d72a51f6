"""
Pydantic models for transport emissions.
"""
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pcf_portal.pydantic_models.calculation import ResolvedEmission
from pcf_portal.pydantic_models.emission_reference import (
    EmissionReferencePydModel,
    OverrideFactorPydModel,
)


def line_item_ids(value: Any) -> Any:
    """Accept either line item ids or nested line item objects."""
    if value is None:
        return []
    if isinstance(value, list):
        return [item.get("id") if isinstance(item, dict) else item for item in value]
    return value


class TransportEmissionPydModel(BaseModel):
    """One transportation leg's emission record for a product."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    distance: Optional[Decimal] = Field(
        None, allow_inf_nan=True, description="Transport distance (km)"
    )
    weight: Optional[Decimal] = Field(
        None, allow_inf_nan=True, description="Weight of transported goods (kg)"
    )
    reference: Optional[int] = Field(None, description="Emission reference id")
    reference_details: Optional[EmissionReferencePydModel] = None
    override_factors: list[OverrideFactorPydModel] = Field(default_factory=list)
    line_items: list[int] = Field(
        default_factory=list, description="Associated BOM line item ids"
    )

    @field_validator("override_factors", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("line_items", mode="before")
    @classmethod
    def normalize_line_items(cls, value: Any) -> Any:
        return line_item_ids(value)


class TransportEmissionView(TransportEmissionPydModel):
    """Transport emission with its resolved total."""

    total_emissions: ResolvedEmission
