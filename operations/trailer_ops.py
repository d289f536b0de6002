"""
Trailer Operations.

Trailer management and persistence of compartment changes.
Functions with dependency injection - the database is always passed in.

- create_trailer() / get_trailer() / list_trailers()
- update_trailer_basic_info() - trailer_code is immutable
- set_trailer_status() - manual activate/deactivate
- add/update/remove_trailer_compartment() - load, apply, save
- get_compartment_summary() - status overview for one trailer
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from data.interface import DatabaseInterface
from domain.models import Trailer, Compartment, CompartmentFields, CompartmentChange, CompartmentRemoval
from domain.rules import (
    derive_trailer_active,
    is_sequential,
    missing_compartment_numbers,
    total_capacity,
)
from domain.validators import (
    validate_trailer_name,
    validate_trailer_code,
    validate_registration_number,
    validate_volume,
)
from domain.exceptions import (
    FleetBaseException,
    DatabaseError,
    NotFoundError,
    ValidationError,
    TrailerActivationError,
)
from operations.compartment_ops import add_compartment, update_compartment, remove_compartment

logger = logging.getLogger(__name__)

EDITABLE_TRAILER_FIELDS = (
    "trailer_name",
    "registration_number",
    "volume_capacity",
    "weight_capacity",
    "haulier_company",
)


# ==================== Conversion ====================


def compartment_from_dict(data: Dict[str, Any]) -> Compartment:
    """Build a Compartment from a database row dict."""
    return Compartment(
        id=data["id"],
        compartment_no=data["compartment_no"],
        capacity=data["capacity"],
        min_volume=data["min_volume"],
        max_volume=data["max_volume"],
        allowed_products=frozenset(data.get("allowed_products") or ()),
        partial_load_allowed=bool(data.get("partial_load_allowed", True)),
        must_use=bool(data.get("must_use", False)),
    )


def compartment_to_dict(compartment: Compartment) -> Dict[str, Any]:
    """Convert a Compartment to a dict for the database layer."""
    return {
        "id": compartment.id,
        "compartment_no": compartment.compartment_no,
        "capacity": compartment.capacity,
        "min_volume": compartment.min_volume,
        "max_volume": compartment.max_volume,
        "allowed_products": sorted(compartment.allowed_products),
        "partial_load_allowed": compartment.partial_load_allowed,
        "must_use": compartment.must_use,
    }


def _trailer_from_dict(data: Dict[str, Any], compartments: List[Dict[str, Any]]) -> Trailer:
    return Trailer(
        id=data["id"],
        trailer_name=data["trailer_name"],
        trailer_code=data["trailer_code"],
        registration_number=data["registration_number"],
        volume_capacity=data["volume_capacity"],
        weight_capacity=data["weight_capacity"],
        haulier_company=data.get("haulier_company"),
        active=bool(data["active"]),
        compartments=[compartment_from_dict(c) for c in compartments],
        created_at=_parse_timestamp(data.get("created_at")),
        updated_at=_parse_timestamp(data.get("updated_at")),
    )


def _parse_timestamp(value) -> Optional[datetime]:
    """SQLite returns CURRENT_TIMESTAMP as "YYYY-MM-DD HH:MM:SS" text."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


# ==================== Trailer CRUD ====================


def create_trailer(
    db: DatabaseInterface,
    trailer_name: str,
    trailer_code: str,
    registration_number: str,
    volume_capacity: int = 0,
    weight_capacity: int = 0,
    haulier_company: Optional[str] = None,
) -> int:
    """
    Create a new trailer.

    New trailers have no compartments and start inactive.

    Args:
        db: Database instance (injected)
        trailer_name: Display name
        trailer_code: Unique code (immutable after creation)
        registration_number: Licence plate
        volume_capacity: Total volume in liters
        weight_capacity: Max weight in kg
        haulier_company: Owning haulier (optional)

    Returns:
        New trailer ID

    Raises:
        ValidationError: If any field is invalid
        DatabaseError: If trailer_code already exists or save fails

    Example:
        >>> trailer_id = create_trailer(db, "Tanker 1", "TR-001", "ABC123", 30000, 40000)
    """
    name = validate_trailer_name(trailer_name)
    code = validate_trailer_code(trailer_code)
    registration = validate_registration_number(registration_number)
    volume = validate_volume(volume_capacity, field_name="volume_capacity")
    weight = validate_volume(weight_capacity, field_name="weight_capacity")

    if volume < 0 or weight < 0:
        raise ValidationError(
            "Capacities cannot be negative",
            details={"volume_capacity": volume, "weight_capacity": weight},
        )

    trailer_id = db.save_trailer(
        trailer_name=name,
        trailer_code=code,
        registration_number=registration,
        volume_capacity=volume,
        weight_capacity=weight,
        haulier_company=(haulier_company or "").strip() or None,
        active=False,
    )
    logger.info(f"Created trailer {code} ({name}) with id {trailer_id}")
    return trailer_id


def get_trailer(db: DatabaseInterface, trailer_id: int) -> Trailer:
    """
    Load a trailer with its compartments.

    Raises:
        NotFoundError: If the trailer does not exist
        DatabaseError: If query fails
    """
    try:
        data = db.get_trailer(trailer_id)
        if data is None:
            raise NotFoundError(
                f"Trailer not found: {trailer_id}",
                details={"trailer_id": trailer_id},
            )
        compartments = db.get_compartments(trailer_id)

    except FleetBaseException:
        raise
    except Exception as e:
        logger.exception(f"Error loading trailer {trailer_id}")
        raise DatabaseError(
            f"Failed to load trailer: {e}",
            details={"trailer_id": trailer_id},
        )

    return _trailer_from_dict(data, compartments)


def list_trailers(db: DatabaseInterface, active_only: bool = False) -> List[Trailer]:
    """
    List all trailers with their compartments.

    Args:
        db: Database instance (injected)
        active_only: Only return active trailers

    Returns:
        List of Trailer objects ordered by trailer_code
    """
    rows = db.list_trailers(active_only=active_only)
    trailers = [_trailer_from_dict(row, db.get_compartments(row["id"])) for row in rows]
    logger.debug(f"Loaded {len(trailers)} trailers (active_only={active_only})")
    return trailers


def update_trailer_basic_info(db: DatabaseInterface, trailer_id: int, **changes) -> Trailer:
    """
    Update basic trailer information.

    Only EDITABLE_TRAILER_FIELDS can change. trailer_code is immutable
    and active is changed through set_trailer_status().

    Args:
        db: Database instance (injected)
        trailer_id: Trailer to update
        **changes: Field values to change

    Returns:
        Updated Trailer

    Raises:
        ValidationError: If a field is invalid or not editable
        NotFoundError: If the trailer does not exist

    Example:
        >>> update_trailer_basic_info(db, 1, trailer_name="Tanker 1B")
    """
    trailer = get_trailer(db, trailer_id)

    if "trailer_code" in changes:
        new_code = (changes.pop("trailer_code") or "").strip().upper()
        if new_code != trailer.trailer_code:
            raise ValidationError(
                "Trailer code cannot be changed after creation",
                details={"trailer_code": trailer.trailer_code, "requested": new_code},
            )

    unknown = set(changes) - set(EDITABLE_TRAILER_FIELDS)
    if unknown:
        raise ValidationError(
            f"Fields cannot be edited here: {', '.join(sorted(unknown))}",
            details={"editable": list(EDITABLE_TRAILER_FIELDS)},
        )

    values = {
        "trailer_name": trailer.trailer_name,
        "registration_number": trailer.registration_number,
        "volume_capacity": trailer.volume_capacity,
        "weight_capacity": trailer.weight_capacity,
        "haulier_company": trailer.haulier_company,
    }

    if "trailer_name" in changes:
        values["trailer_name"] = validate_trailer_name(changes["trailer_name"])
    if "registration_number" in changes:
        values["registration_number"] = validate_registration_number(changes["registration_number"])
    for capacity_field in ("volume_capacity", "weight_capacity"):
        if capacity_field in changes:
            value = validate_volume(changes[capacity_field], field_name=capacity_field)
            if value < 0:
                raise ValidationError(
                    f"{capacity_field} cannot be negative",
                    details={capacity_field: value},
                )
            values[capacity_field] = value
    if "haulier_company" in changes:
        values["haulier_company"] = (changes["haulier_company"] or "").strip() or None

    db.save_trailer(
        trailer_code=trailer.trailer_code,
        active=trailer.active,
        trailer_id=trailer_id,
        **values,
    )
    logger.info(f"Updated trailer {trailer.trailer_code}: {', '.join(sorted(changes)) or 'no changes'}")
    return get_trailer(db, trailer_id)


def set_trailer_status(db: DatabaseInterface, trailer_id: int, active: bool) -> Trailer:
    """
    Manually activate or deactivate a trailer.

    Deactivation always succeeds. Activation only succeeds when the
    trailer has sequential compartments 1..N.

    Raises:
        TrailerActivationError: If activation is requested but the
            compartments are missing or not sequential
        NotFoundError: If the trailer does not exist
    """
    trailer = get_trailer(db, trailer_id)

    if active and not derive_trailer_active(trailer.compartments):
        missing = missing_compartment_numbers(trailer.compartments)
        logger.warning(
            f"Refused to activate trailer {trailer.trailer_code}: "
            f"{'no compartments' if not trailer.compartments else f'missing compartments {missing}'}"
        )
        raise TrailerActivationError(
            "Trailer must have sequential compartments to be activated",
            details={
                "trailer_code": trailer.trailer_code,
                "compartments": trailer.number_of_compartments,
                "missing": missing,
            },
        )

    db.set_trailer_active(trailer_id, active)
    logger.info(f"Trailer {trailer.trailer_code} set to {'active' if active else 'inactive'}")
    return get_trailer(db, trailer_id)


def delete_trailer(db: DatabaseInterface, trailer_id: int) -> bool:
    """
    Delete a trailer together with all its compartments.

    Returns:
        True if deleted, False if the trailer did not exist
    """
    deleted = db.delete_trailer(trailer_id)
    if deleted:
        logger.info(f"Deleted trailer {trailer_id}")
    else:
        logger.warning(f"Trailer {trailer_id} not found - nothing deleted")
    return deleted


# ==================== Compartment persistence ====================


def save_compartment_change(
    db: DatabaseInterface,
    trailer_id: int,
    change: CompartmentChange,
) -> bool:
    """
    Persist a compartment change (compartments + derived status).

    Args:
        db: Database instance (injected)
        trailer_id: Trailer the change belongs to
        change: Result from add/update/remove_compartment

    Returns:
        True if saved

    Raises:
        NotFoundError: If the trailer does not exist
        DatabaseError: If save fails
    """
    try:
        saved = db.replace_compartments(
            trailer_id=trailer_id,
            compartments=[compartment_to_dict(c) for c in change.compartments],
            active=change.active,
        )
    except FleetBaseException:
        raise
    except Exception as e:
        logger.exception(f"Error saving compartments for trailer {trailer_id}")
        raise DatabaseError(
            f"Failed to save compartments: {e}",
            details={"trailer_id": trailer_id},
        )

    if not saved:
        raise NotFoundError(
            f"Trailer not found: {trailer_id}",
            details={"trailer_id": trailer_id},
        )
    return saved


def add_trailer_compartment(
    db: DatabaseInterface,
    trailer_id: int,
    fields: CompartmentFields,
) -> CompartmentChange:
    """
    Add a compartment to a stored trailer and save the result.

    Raises:
        CompartmentValidationError: If volume rules fail (nothing saved)
        DuplicateCompartmentNumber: If the number is already used
        NotFoundError: If the trailer does not exist
    """
    trailer = get_trailer(db, trailer_id)
    change = add_compartment(trailer, fields)
    save_compartment_change(db, trailer_id, change)
    return change


def update_trailer_compartment(
    db: DatabaseInterface,
    trailer_id: int,
    compartment_id: str,
    fields: CompartmentFields,
) -> CompartmentChange:
    """Update a compartment on a stored trailer and save the result."""
    trailer = get_trailer(db, trailer_id)
    change = update_compartment(trailer, compartment_id, fields)
    save_compartment_change(db, trailer_id, change)
    return change


def remove_trailer_compartment(
    db: DatabaseInterface,
    trailer_id: int,
    compartment_id: str,
) -> CompartmentRemoval:
    """
    Remove a compartment from a stored trailer and save the result.

    The caller should show removal.gap_report to the user as a warning.
    """
    trailer = get_trailer(db, trailer_id)
    removal = remove_compartment(trailer, compartment_id)
    save_compartment_change(db, trailer_id, removal)
    return removal


# ==================== Summary ====================


def get_compartment_summary(trailer: Trailer) -> Dict[str, Any]:
    """
    Summarize a trailer's compartment configuration.

    Returns:
        Dict with:
        - count: Number of compartments
        - total_capacity: Sum of compartment capacities (liters)
        - is_sequential: Numbering is exactly 1..N
        - missing: Missing compartment numbers
        - active: Stored trailer status
        - exceeds_volume_capacity: Compartments hold more than the trailer volume

    Example:
        >>> summary = get_compartment_summary(trailer)
        >>> print(f"{summary['count']} compartments, {summary['total_capacity']} L")
    """
    capacity = total_capacity(trailer.compartments)
    return {
        "count": trailer.number_of_compartments,
        "total_capacity": capacity,
        "is_sequential": is_sequential(trailer.compartments),
        "missing": missing_compartment_numbers(trailer.compartments),
        "active": trailer.active,
        "exceeds_volume_capacity": bool(trailer.volume_capacity) and capacity > trailer.volume_capacity,
    }
