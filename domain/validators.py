"""
Input validators for fleet compartments.

These validators ensure data integrity before it reaches the database.
All validators raise ValidationError (or a subclass) on failure.
"""

import math
import re
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Optional, Union, FrozenSet

from .models import CompartmentFields
from .exceptions import (
    ValidationError,
    CapacityRequired,
    MinExceedsCapacity,
    MaxExceedsCapacity,
    MinExceedsMax,
)


def validate_trailer_name(trailer_name: str) -> str:
    """
    Validate trailer name.

    Args:
        trailer_name: Trailer name to validate

    Returns:
        Cleaned trailer name (trimmed)

    Raises:
        ValidationError: If empty or too long
    """
    if not trailer_name or not trailer_name.strip():
        raise ValidationError("Trailer name cannot be empty")

    cleaned = trailer_name.strip()

    if len(cleaned) > 100:
        raise ValidationError(
            f"Trailer name too long: {len(cleaned)} characters (max 100)",
            details={"trailer_name": cleaned},
        )

    return cleaned


def validate_trailer_code(trailer_code: str) -> str:
    """
    Validate trailer code.

    Rules:
    - Not empty
    - Max 20 characters
    - Letters, digits, hyphens and underscores

    Args:
        trailer_code: Trailer code to validate

    Returns:
        Cleaned trailer code (trimmed, uppercased)

    Raises:
        ValidationError: If invalid
    """
    if not trailer_code or not trailer_code.strip():
        raise ValidationError("Trailer code cannot be empty")

    cleaned = trailer_code.strip().upper()

    if len(cleaned) > 20:
        raise ValidationError(
            f"Trailer code too long: {len(cleaned)} characters (max 20)",
            details={"trailer_code": cleaned},
        )

    if not re.match(r"^[A-Z0-9\-_]+$", cleaned):
        raise ValidationError(
            f"Trailer code contains invalid characters: '{cleaned}'",
            details={"trailer_code": cleaned, "allowed": "A-Z, 0-9, -, _"},
        )

    return cleaned


def validate_registration_number(registration_number: str) -> str:
    """
    Validate registration (licence plate) number.

    Returns:
        Cleaned registration number (trimmed, uppercased)

    Raises:
        ValidationError: If empty or too long
    """
    if not registration_number or not registration_number.strip():
        raise ValidationError("Registration number cannot be empty")

    cleaned = registration_number.strip().upper()

    if len(cleaned) > 20:
        raise ValidationError(
            f"Registration number too long: {len(cleaned)} characters (max 20)",
            details={"registration_number": cleaned},
        )

    return cleaned


def validate_volume(value, field_name: str = "volume") -> int:
    """
    Validate a volume or weight in whole units (liters/kg).

    None/NaN is treated as 0 (empty form field or spreadsheet cell).

    Args:
        value: Value to validate (int, integral float, or numeric string)
        field_name: Field name used in error messages

    Returns:
        Value as int

    Raises:
        ValidationError: If not a whole number
    """
    if value is None:
        return 0

    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a number",
            details={field_name: value},
        )

    if isinstance(value, str):
        value = value.strip().replace(" ", "")
        if not value:
            return 0
        try:
            value = float(value)
        except ValueError:
            raise ValidationError(
                f"{field_name} must be a number: '{value}'",
                details={field_name: value},
            )

    try:
        if math.isnan(value):
            return 0
    except TypeError:
        raise ValidationError(
            f"{field_name} must be a number",
            details={field_name: value},
        )

    if math.isinf(value) or float(value) != int(value):
        raise ValidationError(
            f"{field_name} must be whole liters: {value}",
            details={field_name: value},
        )

    return int(value)


def validate_compartment_no(compartment_no) -> int:
    """
    Validate a compartment number.

    Raises:
        ValidationError: If not a positive whole number
    """
    number = validate_volume(compartment_no, field_name="compartment_no")
    if number < 1:
        raise ValidationError(
            f"Compartment number must be positive: {number}",
            details={"compartment_no": number},
        )
    return number


def validate_allowed_products(products: Optional[Iterable[str]]) -> FrozenSet[str]:
    """
    Clean a collection of product names.

    Empty names are dropped, whitespace is trimmed.
    """
    if not products:
        return frozenset()
    if isinstance(products, str):
        raise ValidationError(
            "Allowed products must be a collection of names, not a string",
            details={"allowed_products": products},
        )
    return frozenset(p.strip() for p in products if p and p.strip())


def validate_compartment_fields(fields: CompartmentFields) -> CompartmentFields:
    """
    Validate and normalize compartment volume settings.

    Rules (first failure wins):
    1. capacity > 0
    2. min_volume <= capacity
    3. max_volume <= capacity
    4. min_volume <= max_volume

    Volume logic applied after the checks:
    - must use, no partial load: min = max = capacity
    - must use, partial load: min >= 1 (max raised to min if needed)
    - max clamped to [0, capacity], min clamped to [0, max]

    Normalization is idempotent - validating a normalized record
    returns it unchanged.

    Args:
        fields: Compartment fields from the add/edit form

    Returns:
        New normalized CompartmentFields

    Raises:
        CapacityRequired: capacity missing or <= 0
        MinExceedsCapacity: min_volume > capacity
        MaxExceedsCapacity: max_volume > capacity
        MinExceedsMax: min_volume > max_volume
    """
    capacity = fields.capacity
    min_volume = fields.min_volume
    max_volume = fields.max_volume

    if not capacity or capacity <= 0:
        raise CapacityRequired(
            "Capacity is mandatory and must be greater than 0.",
            details={"capacity": capacity},
        )

    if min_volume > capacity:
        raise MinExceedsCapacity(
            "Minimum volume cannot exceed capacity.",
            details={"min_volume": min_volume, "capacity": capacity},
        )

    if max_volume > capacity:
        raise MaxExceedsCapacity(
            "Maximum volume cannot exceed capacity.",
            details={"max_volume": max_volume, "capacity": capacity},
        )

    if min_volume > max_volume:
        raise MinExceedsMax(
            "Minimum volume cannot be greater than maximum volume.",
            details={"min_volume": min_volume, "max_volume": max_volume},
        )

    if fields.must_use and not fields.partial_load_allowed:
        min_volume = capacity
        max_volume = capacity
    elif fields.must_use:
        min_volume = max(min_volume, 1)
        max_volume = max(max_volume, min_volume)

    max_volume = min(max(max_volume, 0), capacity)
    min_volume = min(max(min_volume, 0), max_volume, capacity)

    return replace(fields, min_volume=min_volume, max_volume=max_volume)


def validate_file_path(
    file_path: Union[Path, str],
    must_exist: bool = True,
    allowed_extensions: Optional[list] = None,
) -> Path:
    """
    Validate file path.

    Args:
        file_path: File path to validate
        must_exist: If True, file must exist on disk
        allowed_extensions: List of allowed extensions (e.g., ['.xlsx', '.csv'])

    Returns:
        Path object

    Raises:
        ValidationError: If invalid
    """
    if not file_path:
        raise ValidationError("File path cannot be empty")

    path = Path(file_path)

    if must_exist and not path.exists():
        raise ValidationError(
            f"File does not exist: {path}",
            details={"file_path": str(path)},
        )

    if allowed_extensions:
        if path.suffix.lower() not in [ext.lower() for ext in allowed_extensions]:
            raise ValidationError(
                f"Invalid file extension: {path.suffix}. Allowed: {allowed_extensions}",
                details={"file_path": str(path), "allowed": allowed_extensions},
            )

    return path
