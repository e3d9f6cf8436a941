# src/sellerfin/services/validation.py

import math
import numbers
from typing import Any

from sellerfin.domain.property import PropertyData

# Without these two there is nothing to build an offer on
REQUIRED_POSITIVE_FIELDS = [
    "listed_price",
    "monthly_rent",
]

OPTIONAL_EXPENSE_FIELDS = [
    "monthly_property_tax",
    "monthly_insurance",
    "monthly_hoa_fee",
    "monthly_other_fees",
]


class InvalidInputError(ValueError):
    """Raised when a payload cannot be turned into PropertyData."""


def _to_num(val: Any, field_name: str) -> float:
    """
    Coerce values like:
      - 87000
      - "87000"
      - "$87,000"
    into float.
    """
    f = _parse_num(val, field_name)
    if not math.isfinite(f):
        raise InvalidInputError(f"{field_name} must be a finite number")
    return f


def _parse_num(val: Any, field_name: str) -> float:
    if val is None:
        raise InvalidInputError(f"Missing required field: {field_name}")
    if isinstance(val, bool):
        raise InvalidInputError(f"Invalid type for {field_name}: {type(val)}")
    if isinstance(val, numbers.Real):
        return float(val)
    if isinstance(val, str):
        s = val.strip().replace("$", "").replace(",", "")
        if not s:
            raise InvalidInputError(f"Missing required field: {field_name}")
        try:
            return float(s)
        except ValueError as err:
            raise InvalidInputError(f"Invalid number for {field_name}: {val!r}") from err
    raise InvalidInputError(f"Invalid type for {field_name}: {type(val)}")


def _to_num_optional(val: Any, field_name: str) -> float:
    """
    Missing or blank optional fields are 0.0; anything else must parse.
    """
    if val is None:
        return 0.0
    if isinstance(val, str) and not val.strip():
        return 0.0
    return _to_num(val, field_name)


def validate_property_payload(raw: dict[str, Any]) -> PropertyData:
    """
    Turn an incoming JSON-ish payload into PropertyData.

    listed_price and monthly_rent must be present and > 0; expense fields
    default to 0 and must not be negative.
    """
    if not isinstance(raw, dict):
        raise InvalidInputError("Payload must be a JSON object")

    cleaned: dict[str, float] = {}

    for field in REQUIRED_POSITIVE_FIELDS:
        value = _to_num(raw.get(field), field)
        if value <= 0:
            raise InvalidInputError(f"{field} must be greater than zero")
        cleaned[field] = value

    for field in OPTIONAL_EXPENSE_FIELDS:
        value = _to_num_optional(raw.get(field), field)
        if value < 0:
            raise InvalidInputError(f"{field} must not be negative")
        cleaned[field] = value

    return PropertyData(**cleaned)
