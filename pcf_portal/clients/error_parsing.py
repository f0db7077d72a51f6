"""
Normalization of backend error payloads.

The backend reports errors in several shapes depending on the view and the
client wrapper in between. They are probed here once, at the boundary, and
turned into a single ApiErrorResponse.
"""
from typing import Any

from pcf_portal.pydantic_models.errors import ApiErrorResponse, ErrorDetail

NON_FIELD_ERRORS = "non_field_errors"

# Where an ``errors`` list may be nested, in probing order
ERROR_CONTAINER_PATHS = (
    ("errors",),
    ("response", "data", "errors"),
    ("body", "errors"),
    ("data", "errors"),
)


def _dig(payload: Any, path: tuple[str, ...]) -> Any:
    current = payload
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _as_error_detail(raw: Any) -> ErrorDetail | None:
    if isinstance(raw, str):
        return ErrorDetail(detail=raw)
    if isinstance(raw, dict) and raw.get("detail"):
        return ErrorDetail(
            attr=raw.get("attr"),
            code=raw.get("code"),
            detail=str(raw["detail"]),
        )
    return None


def _field_errors(payload: dict) -> list[ErrorDetail]:
    """DRF's plain ``{"field": ["message", ...]}`` validation shape."""
    errors = []
    for attr, messages in payload.items():
        if isinstance(messages, list) and messages and isinstance(messages[0], str):
            errors.append(ErrorDetail(attr=attr, detail=messages[0]))
    return errors


def extract_errors(payload: Any) -> list[ErrorDetail]:
    """Collect error entries from any known payload shape."""
    if not isinstance(payload, dict):
        return []

    for path in ERROR_CONTAINER_PATHS:
        raw_errors = _dig(payload, path)
        if isinstance(raw_errors, list):
            return [e for e in map(_as_error_detail, raw_errors) if e is not None]

    if "detail" in payload:
        return []
    return _field_errors(payload)


def normalize_error_payload(payload: Any, status_code: int) -> ApiErrorResponse:
    """
    Turn a backend error body into an ApiErrorResponse.

    The message is the non-field error when there is one, otherwise the first
    error, otherwise the top-level ``detail``, otherwise ``API Error: <status>``.

    Example:
        >>> normalize_error_payload(
        ...     {"errors": [{"attr": "non_field_errors", "detail": "Duplicate"}]}, 400
        ... ).detail
        'Duplicate'
    """
    errors = extract_errors(payload)

    non_field = next((e for e in errors if e.attr == NON_FIELD_ERRORS), None)
    if non_field is not None:
        detail = non_field.detail
    elif errors:
        detail = errors[0].detail
    elif isinstance(payload, dict) and payload.get("detail"):
        detail = str(payload["detail"])
    else:
        detail = f"API Error: {status_code}"

    return ApiErrorResponse(detail=detail, errors=errors)
