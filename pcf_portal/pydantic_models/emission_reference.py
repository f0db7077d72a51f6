"""
Pydantic models for emission reference catalogs and override factors.
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EmissionFactorBase(BaseModel):
    """Biogenic / non-biogenic CO2 coefficient pair for one lifecycle stage."""

    lifecycle_stage: Optional[str] = Field(
        None, description="Lifecycle stage the factor applies to", examples=["A1-A3"]
    )
    co_2_emission_factor_biogenic: Optional[Decimal] = Field(
        None,
        allow_inf_nan=True,
        description="Biogenic CO2 emission factor (kg CO2e per unit)",
        examples=[Decimal("0.12")],
    )
    co_2_emission_factor_non_biogenic: Optional[Decimal] = Field(
        None,
        allow_inf_nan=True,
        description="Non-biogenic CO2 emission factor (kg CO2e per unit)",
        examples=[Decimal("0.85")],
    )


class EmissionFactorPydModel(EmissionFactorBase):
    """Emission factor as stored in a reference catalog."""

    model_config = ConfigDict(from_attributes=True)


class OverrideFactorPydModel(EmissionFactorBase):
    """User-supplied replacement for a reference factor on one record."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = Field(None, description="Present only once persisted")


class EmissionReferencePydModel(BaseModel):
    """Named catalog entry of standard emission factors."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    emission_factors: list[EmissionFactorPydModel] = Field(default_factory=list)


class LifecycleStageChoice(BaseModel):
    """Lifecycle stage choice advertised by the backend OPTIONS schema."""

    value: str
    display_name: str
