"""
Unit tests for Compartment Operations.

Tests cover add/update/remove, numbering, gap reports and the
derived trailer status.
"""

import itertools

import pytest

from domain.models import Trailer, CompartmentFields
from domain.exceptions import (
    DuplicateCompartmentNumber,
    MinExceedsCapacity,
    NotFoundError,
    ValidationError,
)
from operations.compartment_ops import (
    add_compartment,
    update_compartment,
    remove_compartment,
    apply_change,
    validate_compartment,
    new_compartment_id,
)


@pytest.fixture
def trailer():
    """Empty, inactive trailer."""
    return Trailer(
        id=1,
        trailer_name="Tanker 1",
        trailer_code="TR-001",
        registration_number="ABC123",
        volume_capacity=30000,
    )


@pytest.fixture
def ids():
    """Deterministic compartment id factory."""
    counter = itertools.count(1)
    return lambda: f"comp-{next(counter)}"


def flexible(capacity=5000, **kwargs):
    return CompartmentFields(capacity=capacity, min_volume=0, max_volume=capacity, **kwargs)


def build(trailer, count, ids):
    """Add `count` compartments numbered 1..count."""
    for _ in range(count):
        trailer = apply_change(trailer, add_compartment(trailer, flexible(), id_factory=ids))
    return trailer


# ==================== Add ====================


def test_add_first_compartment_activates_trailer(trailer, ids):
    """Test full-load compartment on an empty trailer."""
    fields = CompartmentFields(
        capacity=5000,
        min_volume=0,
        max_volume=5000,
        partial_load_allowed=False,
        must_use=True,
    )

    change = add_compartment(trailer, fields, id_factory=ids)

    assert len(change.compartments) == 1
    compartment = change.compartments[0]
    assert compartment.compartment_no == 1
    assert compartment.min_volume == 5000
    assert compartment.max_volume == 5000
    assert change.active is True
    assert change.activated is True
    # Input trailer untouched
    assert trailer.compartments == []
    assert trailer.active is False


def test_add_rejected_compartment_changes_nothing(trailer, ids):
    """Test a failed validation leaves the trailer as it was."""
    fields = CompartmentFields(capacity=10000, min_volume=12000, max_volume=10000)

    with pytest.raises(MinExceedsCapacity):
        add_compartment(trailer, fields, id_factory=ids)

    assert trailer.compartments == []
    assert trailer.active is False


def test_add_fills_lowest_gap(trailer, ids):
    """Test new compartments fill the lowest missing number."""
    trailer = build(trailer, 3, ids)
    second = trailer.compartments[1]
    trailer = apply_change(trailer, remove_compartment(trailer, second.id))
    assert trailer.active is False

    change = add_compartment(trailer, flexible(), id_factory=ids)

    assert [c.compartment_no for c in change.compartments] == [1, 2, 3]
    assert change.active is True
    assert change.activated is True


def test_add_with_explicit_number(trailer, ids):
    """Test explicit numbers are kept, even if they leave a gap."""
    change = add_compartment(trailer, flexible(compartment_no=3), id_factory=ids)

    assert change.compartments[0].compartment_no == 3
    assert change.active is False
    assert change.missing_numbers == [1, 2]


def test_add_duplicate_number_rejected(trailer, ids):
    """Test compartment numbers are unique per trailer."""
    trailer = build(trailer, 2, ids)

    with pytest.raises(DuplicateCompartmentNumber):
        add_compartment(trailer, flexible(compartment_no=2), id_factory=ids)


def test_add_invalid_number_rejected(trailer, ids):
    """Test explicit numbers must be positive."""
    with pytest.raises(ValidationError):
        add_compartment(trailer, flexible(compartment_no=0), id_factory=ids)


def test_compartments_sorted_by_number(trailer, ids):
    """Test the change always lists compartments in ascending order."""
    trailer = apply_change(trailer, add_compartment(trailer, flexible(compartment_no=2), id_factory=ids))

    change = add_compartment(trailer, flexible(compartment_no=1), id_factory=ids)

    assert [c.compartment_no for c in change.compartments] == [1, 2]
    assert change.is_sequential is True


def test_add_uses_fresh_ids(trailer):
    """Test default id factory gives unique ids."""
    first = apply_change(trailer, add_compartment(trailer, flexible()))
    change = add_compartment(first, flexible())

    ids = {c.id for c in change.compartments}
    assert len(ids) == 2
    assert new_compartment_id() != new_compartment_id()


# ==================== Update ====================


def test_update_replaces_fields_and_keeps_id(trailer, ids):
    """Test update is a full replacement that preserves identity."""
    trailer = build(trailer, 2, ids)
    target = trailer.compartments[0]

    change = update_compartment(
        trailer,
        target.id,
        CompartmentFields(capacity=8000, min_volume=100, max_volume=7000, allowed_products={"Diesel"}),
    )

    updated = change.compartments[0]
    assert updated.id == target.id
    assert updated.compartment_no == 1
    assert updated.capacity == 8000
    assert updated.allowed_products == frozenset({"Diesel"})
    assert change.active is True
    assert change.activated is False  # Already active


def test_update_renumber_creates_gap(trailer, ids):
    """Test renumbering recomputes the trailer status."""
    trailer = build(trailer, 2, ids)
    target = trailer.compartments[1]

    change = update_compartment(trailer, target.id, flexible(compartment_no=5))

    assert [c.compartment_no for c in change.compartments] == [1, 5]
    assert change.active is False
    assert change.missing_numbers == [2, 3, 4]


def test_update_to_own_number_allowed(trailer, ids):
    """Test keeping the same number is not a duplicate."""
    trailer = build(trailer, 2, ids)
    target = trailer.compartments[1]

    change = update_compartment(trailer, target.id, flexible(capacity=7000, compartment_no=2))

    assert change.compartments[1].capacity == 7000


def test_update_duplicate_number_rejected(trailer, ids):
    """Test a number used by another compartment is rejected."""
    trailer = build(trailer, 2, ids)

    with pytest.raises(DuplicateCompartmentNumber):
        update_compartment(trailer, trailer.compartments[1].id, flexible(compartment_no=1))


def test_update_unknown_compartment(trailer, ids):
    """Test updating an unknown id raises NotFoundError."""
    trailer = build(trailer, 1, ids)

    with pytest.raises(NotFoundError):
        update_compartment(trailer, "missing", flexible())


def test_update_validation_failure_leaves_trailer(trailer, ids):
    """Test rejected updates do not alter the compartment."""
    trailer = build(trailer, 1, ids)
    target = trailer.compartments[0]

    with pytest.raises(MinExceedsCapacity):
        update_compartment(
            trailer,
            target.id,
            CompartmentFields(capacity=1000, min_volume=2000, max_volume=1000),
        )

    assert trailer.compartments[0] == target


# ==================== Remove ====================


def test_remove_first_of_two_leaves_gap(trailer, ids):
    """Test removing compartment 1 of {1, 2} deactivates the trailer."""
    trailer = build(trailer, 2, ids)
    assert trailer.active is True

    removal = remove_compartment(trailer, trailer.compartments[0].id)

    assert [c.compartment_no for c in removal.compartments] == [2]
    assert removal.active is False
    assert removal.gap_report == [1]
    assert removal.has_gaps is True


def test_remove_last_compartment_no_gap(trailer, ids):
    """Test removing the highest number keeps the trailer active."""
    trailer = build(trailer, 3, ids)

    removal = remove_compartment(trailer, trailer.compartments[2].id)

    assert [c.compartment_no for c in removal.compartments] == [1, 2]
    assert removal.active is True
    assert removal.gap_report == []
    assert removal.has_gaps is False


def test_remove_only_compartment_deactivates(trailer, ids):
    """Test an empty trailer is inactive."""
    trailer = build(trailer, 1, ids)

    removal = remove_compartment(trailer, trailer.compartments[0].id)

    assert removal.compartments == []
    assert removal.active is False
    assert removal.gap_report == []


def test_remove_unknown_compartment(trailer, ids):
    """Test removing an unknown id raises NotFoundError."""
    with pytest.raises(NotFoundError):
        remove_compartment(trailer, "missing")


# ==================== Status ====================


def test_status_matches_numbering_after_every_change(trailer, ids):
    """Test active is always derived from the resulting compartments."""
    trailer = build(trailer, 4, ids)
    steps = [
        lambda t: remove_compartment(t, t.compartments[1].id),   # {1, 3, 4}
        lambda t: add_compartment(t, flexible(), id_factory=ids),  # {1, 2, 3, 4}
        lambda t: update_compartment(t, t.compartments[3].id, flexible(compartment_no=9)),
        lambda t: remove_compartment(t, t.compartments[3].id),   # {1, 2, 3}
    ]
    expected = [False, True, False, True]

    for step, active in zip(steps, expected):
        change = step(trailer)
        numbers = [c.compartment_no for c in change.compartments]
        assert change.active is active
        assert change.active == (numbers == list(range(1, len(numbers) + 1)) and bool(numbers))
        trailer = apply_change(trailer, change)


def test_validate_compartment_returns_normalized():
    """Test validate_compartment applies the volume logic."""
    fields = CompartmentFields(capacity=5000, max_volume=5000, partial_load_allowed=False, must_use=True)

    assert validate_compartment(fields).min_volume == 5000
