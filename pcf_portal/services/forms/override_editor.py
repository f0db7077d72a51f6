"""
Editing of override factor lists attached to emission forms.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from pcf_portal.pydantic_models.forms import OverrideFactorForm
from pcf_portal.services.calculators.unit_converter import UnitConverter
from pcf_portal.utils.constants import LIFECYCLE_STAGE_VALUES

logger = logging.getLogger(__name__)

COEFFICIENT_FIELDS = {
    "biogenic": "co_2_emission_factor_biogenic",
    "non_biogenic": "co_2_emission_factor_non_biogenic",
    "co_2_emission_factor_biogenic": "co_2_emission_factor_biogenic",
    "co_2_emission_factor_non_biogenic": "co_2_emission_factor_non_biogenic",
}
LIFECYCLE_STAGE_FIELD = "lifecycle_stage"


def lifecycle_enum_value(raw: Optional[str], allowed: Iterable[str] = LIFECYCLE_STAGE_VALUES) -> Optional[str]:
    """
    Map a lifecycle stage value or display string to its stage value.

    Display strings look like "A1 - Raw material supply"; the part before
    " - " is the value. Unknown stages give None.

    Example:
        >>> lifecycle_enum_value("A1 - Raw material supply")
        'A1'
    """
    if raw is None:
        return None
    value = raw.split(" - ", 1)[0].strip()
    return value if value in set(allowed) else None


class OverrideListEditor:
    """
    Add, edit and remove override entries of one form.

    Args:
        overrides: Initial entries, e.g. from a record being edited
        allowed_stages: Lifecycle stage values accepted by the backend
    """

    def __init__(
        self,
        overrides: Iterable[OverrideFactorForm] = (),
        allowed_stages: Iterable[str] = LIFECYCLE_STAGE_VALUES,
    ):
        self.overrides: list[OverrideFactorForm] = [o.model_copy() for o in overrides]
        self.allowed_stages = frozenset(allowed_stages) or LIFECYCLE_STAGE_VALUES

    def __len__(self) -> int:
        return len(self.overrides)

    def add(self) -> OverrideFactorForm:
        """Append a new entry with no stage and zero coefficients."""
        entry = OverrideFactorForm(
            lifecycle_stage=None,
            co_2_emission_factor_biogenic=Decimal("0"),
            co_2_emission_factor_non_biogenic=Decimal("0"),
        )
        self.overrides.append(entry)
        return entry

    def edit(self, index: int, field: str, raw: Optional[str]) -> OverrideFactorForm:
        """
        Update one field of the entry at ``index`` from free-text input.

        Args:
            index: Position of the entry
            field: "lifecycle_stage", "biogenic" or "non_biogenic"
            raw: Text as typed or selected by the user

        Raises:
            IndexError: No entry at that index
            ValueError: Unknown field
        """
        entry = self.overrides[self._check_index(index)]

        if field == LIFECYCLE_STAGE_FIELD:
            entry.lifecycle_stage = lifecycle_enum_value(raw, self.allowed_stages)
        elif field in COEFFICIENT_FIELDS:
            setattr(entry, COEFFICIENT_FIELDS[field], UnitConverter.parse_form_number(raw))
        else:
            raise ValueError(f"Unknown override field: {field}")
        return entry

    def remove(self, index: int) -> OverrideFactorForm:
        """Remove the entry at ``index``; later entries shift down by one."""
        return self.overrides.pop(self._check_index(index))

    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self.overrides):
            raise IndexError(f"No override at index {index}")
        return index

    @staticmethod
    def display_value(value: Optional[Decimal]) -> Decimal:
        """Coefficient shown in an input: not entered shows as 0."""
        return Decimal("0") if value is None else value

    @staticmethod
    def entry_incomplete(entry: OverrideFactorForm) -> bool:
        return (
            not entry.lifecycle_stage
            or not UnitConverter.is_finite(entry.co_2_emission_factor_biogenic)
            or not UnitConverter.is_finite(entry.co_2_emission_factor_non_biogenic)
        )

    def is_incomplete(self) -> bool:
        """True if any entry lacks a stage or has a non-finite coefficient."""
        return any(self.entry_incomplete(entry) for entry in self.overrides)

    def to_payload(self) -> list[dict]:
        """Backend payload; ids are kept only for entries already persisted."""
        payload = []
        for entry in self.overrides:
            item = {
                "lifecycle_stage": entry.lifecycle_stage,
                "co_2_emission_factor_biogenic": entry.co_2_emission_factor_biogenic,
                "co_2_emission_factor_non_biogenic": entry.co_2_emission_factor_non_biogenic,
            }
            if entry.id is not None:
                item = {"id": entry.id, **item}
            payload.append(item)
        return payload
