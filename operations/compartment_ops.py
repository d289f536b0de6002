"""
Compartment Operations.

Maintains one trailer's compartment collection and the trailer's
derived active flag. Pure functions - no database access, no side effects.
Returns CompartmentChange results that can be saved separately.

- validate_compartment() - Volume rules + normalization
- add_compartment() - New compartment, fills lowest gap in numbering
- update_compartment() - Full replacement of a compartment's fields
- remove_compartment() - Delete + gap report
"""

import logging
import uuid
from dataclasses import replace
from typing import Callable, List, Optional

from domain.models import (
    Trailer,
    Compartment,
    CompartmentFields,
    CompartmentChange,
    CompartmentRemoval,
)
from domain.rules import (
    next_compartment_number,
    missing_compartment_numbers,
    derive_trailer_active,
    sort_compartments,
)
from domain.validators import validate_compartment_fields, validate_compartment_no
from domain.exceptions import (
    CompartmentValidationError,
    DuplicateCompartmentNumber,
    NotFoundError,
)

logger = logging.getLogger(__name__)


def new_compartment_id() -> str:
    """Allocate a fresh opaque compartment id."""
    return uuid.uuid4().hex


def validate_compartment(fields: CompartmentFields) -> CompartmentFields:
    """
    Validate compartment fields and apply volume logic.

    Args:
        fields: Candidate compartment fields

    Returns:
        Normalized fields, ready to persist

    Raises:
        CompartmentValidationError: One of CapacityRequired,
            MinExceedsCapacity, MaxExceedsCapacity, MinExceedsMax

    Example:
        >>> fields = CompartmentFields(capacity=5000, max_volume=5000,
        ...                            partial_load_allowed=False, must_use=True)
        >>> validate_compartment(fields).min_volume
        5000
    """
    try:
        normalized = validate_compartment_fields(fields)
    except CompartmentValidationError as e:
        logger.error(f"Compartment rejected: {e}")
        raise

    if normalized != fields:
        logger.debug(
            f"Normalized compartment volumes: "
            f"{fields.min_volume}-{fields.max_volume} L -> "
            f"{normalized.min_volume}-{normalized.max_volume} L"
        )
    return normalized


def add_compartment(
    trailer: Trailer,
    fields: CompartmentFields,
    id_factory: Callable[[], str] = new_compartment_id,
) -> CompartmentChange:
    """
    Add a compartment to a trailer.

    If fields.compartment_no is None, the next number filling the lowest
    gap is used. Otherwise the given number is used (must be free).

    The trailer is not modified - the returned change holds the new
    sorted compartment list and the derived active flag.

    Args:
        trailer: Trailer to add to
        fields: Candidate compartment fields
        id_factory: Callable returning a new compartment id

    Returns:
        CompartmentChange with sorted compartments and active flag

    Raises:
        CompartmentValidationError: If volume rules fail
        DuplicateCompartmentNumber: If compartment_no is already used
        ValidationError: If compartment_no is not positive

    Example:
        >>> change = add_compartment(trailer, CompartmentFields(capacity=5000, max_volume=5000))
        >>> change.compartments[-1].compartment_no
        1
    """
    existing = list(trailer.compartments)

    if fields.compartment_no is None:
        compartment_no = next_compartment_number(existing)
    else:
        compartment_no = validate_compartment_no(fields.compartment_no)
        _ensure_number_free(existing, compartment_no, trailer=trailer)

    normalized = validate_compartment(fields)

    compartment = _build_compartment(id_factory(), compartment_no, normalized)
    change = _build_change(trailer, existing + [compartment])

    logger.info(
        f"Added compartment {compartment_no} ({compartment.capacity} L) "
        f"to trailer {trailer.trailer_code} - "
        f"{len(change.compartments)} compartments, {'active' if change.active else 'inactive'}"
    )
    return change


def update_compartment(
    trailer: Trailer,
    compartment_id: str,
    fields: CompartmentFields,
) -> CompartmentChange:
    """
    Replace the editable fields of an existing compartment.

    The compartment keeps its id. If fields.compartment_no is None the
    current number is kept; a new number must not collide with another
    compartment.

    Args:
        trailer: Trailer owning the compartment
        compartment_id: Id of the compartment to update
        fields: New compartment fields (full replacement)

    Returns:
        CompartmentChange with sorted compartments and active flag

    Raises:
        NotFoundError: If compartment_id is not on the trailer
        CompartmentValidationError: If volume rules fail
        DuplicateCompartmentNumber: If the new number is already used
    """
    existing = list(trailer.compartments)
    index = _find_compartment_index(existing, compartment_id, trailer)
    current = existing[index]

    if fields.compartment_no is None:
        compartment_no = current.compartment_no
    else:
        compartment_no = validate_compartment_no(fields.compartment_no)
        others = existing[:index] + existing[index + 1:]
        _ensure_number_free(others, compartment_no, trailer=trailer)

    normalized = validate_compartment(fields)

    existing[index] = _build_compartment(current.id, compartment_no, normalized)
    change = _build_change(trailer, existing)

    if compartment_no != current.compartment_no:
        logger.info(
            f"Renumbered compartment {current.compartment_no} -> {compartment_no} "
            f"on trailer {trailer.trailer_code}"
        )
    logger.info(
        f"Updated compartment {compartment_no} on trailer {trailer.trailer_code} - "
        f"{'active' if change.active else 'inactive'}"
    )
    return change


def remove_compartment(trailer: Trailer, compartment_id: str) -> CompartmentRemoval:
    """
    Remove a compartment from a trailer.

    Removal always succeeds for a known id. If it leaves a gap in the
    numbering the trailer becomes inactive and the missing numbers are
    returned in gap_report. Gaps are not repaired.

    Args:
        trailer: Trailer owning the compartment
        compartment_id: Id of the compartment to remove

    Returns:
        CompartmentRemoval with remaining compartments, active flag
        and gap_report

    Raises:
        NotFoundError: If compartment_id is not on the trailer

    Example:
        >>> # Compartments 1, 2, 3 - remove 2
        >>> removal = remove_compartment(trailer, second.id)
        >>> removal.active, removal.gap_report
        (False, [2])
    """
    existing = list(trailer.compartments)
    index = _find_compartment_index(existing, compartment_id, trailer)
    removed = existing.pop(index)

    remaining = sort_compartments(existing)
    active = derive_trailer_active(remaining)
    missing = missing_compartment_numbers(remaining)

    removal = CompartmentRemoval(
        compartments=remaining,
        active=active,
        missing_numbers=missing,
        activated=active and not trailer.active,
        gap_report=missing,
    )

    if removal.has_gaps:
        logger.warning(
            f"Removing compartment {removed.compartment_no} left gaps on trailer "
            f"{trailer.trailer_code} (missing: {', '.join(str(n) for n in missing)}) - "
            f"trailer deactivated"
        )
    else:
        logger.info(
            f"Removed compartment {removed.compartment_no} from trailer "
            f"{trailer.trailer_code} - {len(remaining)} compartments left"
        )
    return removal


def apply_change(trailer: Trailer, change: CompartmentChange) -> Trailer:
    """
    Return a copy of the trailer with the change applied.

    Useful when chaining several in-memory changes before saving.
    """
    return replace(trailer, compartments=list(change.compartments), active=change.active)


# ==================== Helpers ====================


def _build_compartment(
    compartment_id: str,
    compartment_no: int,
    fields: CompartmentFields,
) -> Compartment:
    return Compartment(
        id=compartment_id,
        compartment_no=compartment_no,
        capacity=fields.capacity,
        min_volume=fields.min_volume,
        max_volume=fields.max_volume,
        allowed_products=fields.allowed_products,
        partial_load_allowed=fields.partial_load_allowed,
        must_use=fields.must_use,
    )


def _build_change(trailer: Trailer, compartments: List[Compartment]) -> CompartmentChange:
    """Sort compartments and derive the trailer status."""
    ordered = sort_compartments(compartments)
    active = derive_trailer_active(ordered)

    if active and not trailer.active:
        logger.info(
            f"All compartments on trailer {trailer.trailer_code} are sequential - "
            f"trailer activated"
        )

    return CompartmentChange(
        compartments=ordered,
        active=active,
        missing_numbers=missing_compartment_numbers(ordered),
        activated=active and not trailer.active,
    )


def _find_compartment_index(
    compartments: List[Compartment],
    compartment_id: str,
    trailer: Trailer,
) -> int:
    for index, compartment in enumerate(compartments):
        if compartment.id == compartment_id:
            return index
    raise NotFoundError(
        f"Compartment not found on trailer {trailer.trailer_code}",
        details={"compartment_id": compartment_id, "trailer_id": trailer.id},
    )


def _ensure_number_free(
    compartments: List[Compartment],
    compartment_no: int,
    trailer: Optional[Trailer] = None,
) -> None:
    if any(c.compartment_no == compartment_no for c in compartments):
        raise DuplicateCompartmentNumber(
            f"Compartment {compartment_no} already exists",
            details={
                "compartment_no": compartment_no,
                "trailer_code": trailer.trailer_code if trailer else None,
            },
        )
