"""
Domain layer for fleet compartments.

This module contains core business entities, rules, and validators.
No dependencies on database, UI, or external frameworks.
"""

from .models import (
    Trailer,
    Compartment,
    CompartmentFields,
    CompartmentChange,
    CompartmentRemoval,
)

from .exceptions import (
    FleetBaseException,
    DatabaseError,
    ImportValidationError,
    ValidationError,
    NotFoundError,
    CompartmentValidationError,
    CapacityRequired,
    MinExceedsCapacity,
    MaxExceedsCapacity,
    MinExceedsMax,
    DuplicateCompartmentNumber,
    TrailerActivationError,
)

from .validators import (
    validate_trailer_name,
    validate_trailer_code,
    validate_registration_number,
    validate_volume,
    validate_compartment_no,
    validate_allowed_products,
    validate_compartment_fields,
    validate_file_path,
)

from .rules import (
    next_compartment_number,
    is_sequential,
    missing_compartment_numbers,
    derive_trailer_active,
    sort_compartments,
    total_capacity,
    is_all_products,
    describe_allowed_products,
    describe_loading_mode,
    compartment_badges,
    AVAILABLE_PRODUCTS,
)

__all__ = [
    # Models
    "Trailer",
    "Compartment",
    "CompartmentFields",
    "CompartmentChange",
    "CompartmentRemoval",
    # Exceptions
    "FleetBaseException",
    "DatabaseError",
    "ImportValidationError",
    "ValidationError",
    "NotFoundError",
    "CompartmentValidationError",
    "CapacityRequired",
    "MinExceedsCapacity",
    "MaxExceedsCapacity",
    "MinExceedsMax",
    "DuplicateCompartmentNumber",
    "TrailerActivationError",
    # Validators
    "validate_trailer_name",
    "validate_trailer_code",
    "validate_registration_number",
    "validate_volume",
    "validate_compartment_no",
    "validate_allowed_products",
    "validate_compartment_fields",
    "validate_file_path",
    # Rules
    "next_compartment_number",
    "is_sequential",
    "missing_compartment_numbers",
    "derive_trailer_active",
    "sort_compartments",
    "total_capacity",
    "is_all_products",
    "describe_allowed_products",
    "describe_loading_mode",
    "compartment_badges",
    "AVAILABLE_PRODUCTS",
]
