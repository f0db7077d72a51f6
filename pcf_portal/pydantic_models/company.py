"""
Pydantic models for companies.
"""
from pydantic import BaseModel, ConfigDict


class CompanyPydModel(BaseModel):
    """Company as returned by the backend."""

    model_config = ConfigDict(from_attributes=True)

    id: int | str
    name: str
    business_registration_number: str = ""
    vat_number: str = ""

