"""
Validation of the add/edit emission forms and BOM quantities.

Each form is checked twice: ``*_incomplete`` decides whether the submit button
is enabled, ``validate_*`` runs on submit and builds the backend payload.
"""

import logging
from decimal import Decimal
from typing import Optional, Union

from pcf_portal.pydantic_models.forms import (
    FormValidationResult,
    ProductionEnergyEmissionForm,
    TransportEmissionForm,
    UserEnergyEmissionForm,
)
from pcf_portal.services.calculators.unit_converter import UnitConverter
from pcf_portal.services.forms.override_editor import OverrideListEditor

logger = logging.getLogger(__name__)

INVALID_DISTANCE = "Please enter a valid distance (greater than 0)."
INVALID_WEIGHT = "Please enter a valid weight (greater than 0)."
INVALID_ENERGY = "Please enter a valid energy consumption (greater than 0)."
INVALID_USER_ENERGY = "Please enter a valid energy consumption value (must be 1 or greater)."
INVALID_OVERRIDES = "Please fill in all override fields correctly."
MISSING_REFERENCE = "Please select an emission reference."
INVALID_QUANTITY = "Please enter a valid quantity greater than 0"


class FormValidationError(Exception):
    """Raised when a form cannot be submitted."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


EmissionForm = Union[TransportEmissionForm, ProductionEnergyEmissionForm]


def _blank(value: str) -> bool:
    return value.strip() == ""


def _parse_reference(raw: str) -> Optional[int]:
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _overrides_incomplete(form: EmissionForm) -> bool:
    return OverrideListEditor(form.override_factors).is_incomplete()


def transport_form_incomplete(form: TransportEmissionForm) -> bool:
    """
    Whether the transport form is missing input.

    True iff distance or weight is blank after trimming, no reference is
    selected, or any override lacks a stage or has a non-finite coefficient.
    """
    return (
        _blank(form.distance)
        or _blank(form.weight)
        or _blank(form.reference)
        or _overrides_incomplete(form)
    )


def production_energy_form_incomplete(form: ProductionEnergyEmissionForm) -> bool:
    return (
        _blank(form.energy_consumption)
        or _blank(form.reference)
        or _overrides_incomplete(form)
    )


def _common_payload(form: EmissionForm, reference: int, errors: list[str]) -> dict:
    if _overrides_incomplete(form):
        errors.append(INVALID_OVERRIDES)
    payload = {
        "reference": reference,
        "override_factors": OverrideListEditor(form.override_factors).to_payload(),
    }
    if form.line_items:
        payload["line_items"] = list(form.line_items)
    return payload


def validate_transport_form(form: TransportEmissionForm) -> dict:
    """
    Validate a transport form and build its backend payload.

    Returns:
        Payload with distance, weight, reference and override_factors;
        line_items only when some are selected

    Raises:
        FormValidationError: With one message per problem found
    """
    errors = []
    distance = UnitConverter.parse_positive(form.distance)
    if distance is None:
        errors.append(INVALID_DISTANCE)
    weight = UnitConverter.parse_positive(form.weight)
    if weight is None:
        errors.append(INVALID_WEIGHT)
    reference = _parse_reference(form.reference)
    if reference is None:
        errors.append(MISSING_REFERENCE)

    payload = _common_payload(form, reference, errors)
    if errors:
        logger.info(f"Transport form rejected: {errors}")
        raise FormValidationError(errors)
    return {"distance": distance, "weight": weight, **payload}


def validate_production_energy_form(form: ProductionEnergyEmissionForm) -> dict:
    """Validate a production energy form and build its backend payload."""
    errors = []
    energy = UnitConverter.parse_positive(form.energy_consumption)
    if energy is None:
        errors.append(INVALID_ENERGY)
    reference = _parse_reference(form.reference)
    if reference is None:
        errors.append(MISSING_REFERENCE)

    payload = _common_payload(form, reference, errors)
    if errors:
        logger.info(f"Production energy form rejected: {errors}")
        raise FormValidationError(errors)
    return {"energy_consumption": energy, **payload}


def user_energy_form_incomplete(form: UserEnergyEmissionForm) -> bool:
    return _blank(form.energy_consumption)


def validate_user_energy_form(form: UserEnergyEmissionForm) -> dict:
    """
    Validate a user energy form and build its backend payload.

    Energy must be at least 1 kWh. A blank reference is sent as null, and
    line_items is always sent so clearing the selection reaches the backend.

    Raises:
        FormValidationError: With one message per problem found
    """
    errors = []
    energy = UnitConverter.parse_positive(form.energy_consumption)
    if energy is None or energy < 1:
        errors.append(INVALID_USER_ENERGY)
    reference = None
    if not _blank(form.reference):
        reference = _parse_reference(form.reference)
        if reference is None:
            errors.append(MISSING_REFERENCE)
    if _overrides_incomplete(form):
        errors.append(INVALID_OVERRIDES)

    if errors:
        logger.info(f"User energy form rejected: {errors}")
        raise FormValidationError(errors)
    return {
        "energy_consumption": energy,
        "reference": reference,
        "override_factors": OverrideListEditor(form.override_factors).to_payload(),
        "line_items": list(form.line_items),
    }


def check_transport_form(form: TransportEmissionForm) -> FormValidationResult:
    """Validate without raising, for live form feedback."""
    try:
        validate_transport_form(form)
        errors = []
    except FormValidationError as e:
        errors = e.errors
    return FormValidationResult(incomplete=transport_form_incomplete(form), errors=errors)


def check_production_energy_form(form: ProductionEnergyEmissionForm) -> FormValidationResult:
    try:
        validate_production_energy_form(form)
        errors = []
    except FormValidationError as e:
        errors = e.errors
    return FormValidationResult(
        incomplete=production_energy_form_incomplete(form), errors=errors
    )


def check_user_energy_form(form: UserEnergyEmissionForm) -> FormValidationResult:
    try:
        validate_user_energy_form(form)
        errors = []
    except FormValidationError as e:
        errors = e.errors
    return FormValidationResult(incomplete=user_energy_form_incomplete(form), errors=errors)


def parse_quantity(raw: str) -> Decimal:
    """
    Parse a BOM quantity, which must be a number greater than zero.

    Raises:
        FormValidationError: Blank, non-numeric or <= 0
    """
    quantity = UnitConverter.parse_positive(raw)
    if quantity is None:
        raise FormValidationError([INVALID_QUANTITY])
    return quantity
