"""
Pydantic models for user energy emissions.

Energy consumed while the product is in use, recorded per product with the
same shape as production energy.
"""
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pcf_portal.pydantic_models.calculation import ResolvedEmission
from pcf_portal.pydantic_models.emission_reference import (
    EmissionReferencePydModel,
    OverrideFactorPydModel,
)
from pcf_portal.pydantic_models.transport_emission import line_item_ids


class UserEnergyEmissionPydModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    energy_consumption: Optional[Decimal] = Field(
        None, allow_inf_nan=True, description="Energy consumed during use (kWh)"
    )
    reference: Optional[int] = None
    reference_details: Optional[EmissionReferencePydModel] = None
    override_factors: list[OverrideFactorPydModel] = Field(default_factory=list)
    line_items: list[int] = Field(default_factory=list)

    @field_validator("override_factors", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("line_items", mode="before")
    @classmethod
    def normalize_line_items(cls, value: Any) -> Any:
        return line_item_ids(value)


class UserEnergyEmissionView(UserEnergyEmissionPydModel):
    """User energy emission with its resolved total."""

    total_emissions: ResolvedEmission
