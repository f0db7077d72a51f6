"""
Pydantic models for the add/edit emission forms.

Numeric inputs arrive as free text, exactly as typed by the user; parsing and
validation live in ``pcf_portal.services.forms``.
"""
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from pcf_portal.services.calculators.unit_converter import UnitConverter


def as_text(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    return value


class OverrideFactorForm(BaseModel):
    """Override factor row in a form, before submission."""

    id: Optional[int] = None
    lifecycle_stage: Optional[str] = None
    co_2_emission_factor_biogenic: Optional[Decimal] = Field(
        Decimal("0"), allow_inf_nan=True
    )
    co_2_emission_factor_non_biogenic: Optional[Decimal] = Field(
        Decimal("0"), allow_inf_nan=True
    )

    @field_validator(
        "co_2_emission_factor_biogenic",
        "co_2_emission_factor_non_biogenic",
        mode="before",
    )
    @classmethod
    def parse_coefficient(cls, value: Any) -> Any:
        if isinstance(value, str):
            return UnitConverter.parse_form_number(value)
        return value


class TransportEmissionForm(BaseModel):
    """Add/edit transport emission form state."""

    distance: str = ""
    weight: str = ""
    reference: str = ""
    override_factors: list[OverrideFactorForm] = Field(default_factory=list)
    line_items: list[int] = Field(default_factory=list)

    @field_validator("distance", "weight", "reference", mode="before")
    @classmethod
    def text_inputs(cls, value: Any) -> Any:
        return as_text(value)


class ProductionEnergyEmissionForm(BaseModel):
    """Add/edit production energy emission form state."""

    energy_consumption: str = ""
    reference: str = ""
    override_factors: list[OverrideFactorForm] = Field(default_factory=list)
    line_items: list[int] = Field(default_factory=list)

    @field_validator("energy_consumption", "reference", mode="before")
    @classmethod
    def text_inputs(cls, value: Any) -> Any:
        return as_text(value)


class UserEnergyEmissionForm(ProductionEnergyEmissionForm):
    """Add/edit user energy emission form state. The reference may stay blank."""


class FormValidationResult(BaseModel):
    """Outcome of validating a form without submitting it."""

    incomplete: bool
    errors: list[str] = Field(default_factory=list)
