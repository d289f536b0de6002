"""
Unit tests for SQLite database implementation.

Tests cover trailer CRUD, compartment replacement and migrations.
"""

import pytest
import tempfile
from pathlib import Path

from data import create_database
from domain.exceptions import DatabaseError


@pytest.fixture
def db():
    """Create a temporary database file for testing."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    database = create_database("sqlite", db_path)
    yield database
    database.close()

    # Cleanup
    Path(db_path).unlink(missing_ok=True)


def save_default_trailer(db, code="TR-001", **overrides):
    values = {
        "trailer_name": "Tanker 1",
        "trailer_code": code,
        "registration_number": "ABC123",
        "volume_capacity": 30000,
        "weight_capacity": 40000,
    }
    values.update(overrides)
    return db.save_trailer(**values)


def compartment_row(compartment_id, number, capacity=5000, products=()):
    return {
        "id": compartment_id,
        "compartment_no": number,
        "capacity": capacity,
        "min_volume": 0,
        "max_volume": capacity,
        "allowed_products": list(products),
        "partial_load_allowed": True,
        "must_use": False,
    }


def test_create_database():
    """Test database creation and migrations."""
    with tempfile.TemporaryDirectory() as tmp:
        db = create_database("sqlite", Path(tmp) / "nested" / "fleet.db")
        assert db is not None
        db.close()


def test_migrations_are_tracked(tmp_path):
    """Test reopening a database does not re-run migrations."""
    path = tmp_path / "fleet.db"
    first = create_database("sqlite", path)
    save_default_trailer(first)
    first.close()

    second = create_database("sqlite", path)
    assert second.get_trailer_by_code("TR-001") is not None
    second.close()


def test_unknown_backend():
    """Test only sqlite is supported."""
    with pytest.raises(ValueError):
        create_database("postgres", ":memory:")


def test_save_and_get_trailer(db):
    """Test saving and retrieving a trailer."""
    trailer_id = save_default_trailer(db, haulier_company="North Haulage")

    assert trailer_id > 0

    trailer = db.get_trailer(trailer_id)
    assert trailer["trailer_name"] == "Tanker 1"
    assert trailer["trailer_code"] == "TR-001"
    assert trailer["volume_capacity"] == 30000
    assert trailer["haulier_company"] == "North Haulage"
    assert trailer["active"] is False


def test_get_missing_trailer(db):
    """Test unknown ids return None."""
    assert db.get_trailer(999) is None
    assert db.get_trailer_by_code("NOPE") is None


def test_duplicate_trailer_code_raises_error(db):
    """Test that duplicate trailer codes are rejected."""
    save_default_trailer(db)

    with pytest.raises(DatabaseError) as exc_info:
        save_default_trailer(db, trailer_name="Other")

    assert "already exists" in str(exc_info.value)


def test_update_trailer_keeps_code(db):
    """Test updates never change trailer_code."""
    trailer_id = save_default_trailer(db)

    db.save_trailer(
        trailer_name="Renamed",
        trailer_code="CHANGED",
        registration_number="XYZ999",
        trailer_id=trailer_id,
    )

    trailer = db.get_trailer(trailer_id)
    assert trailer["trailer_name"] == "Renamed"
    assert trailer["registration_number"] == "XYZ999"
    assert trailer["trailer_code"] == "TR-001"


def test_list_trailers(db):
    """Test listing trailers, ordering and active filter."""
    first = save_default_trailer(db, code="TR-B")
    save_default_trailer(db, code="TR-A")
    db.set_trailer_active(first, True)

    all_trailers = db.list_trailers()
    assert [t["trailer_code"] for t in all_trailers] == ["TR-A", "TR-B"]

    active = db.list_trailers(active_only=True)
    assert [t["trailer_code"] for t in active] == ["TR-B"]

    newest_first = db.list_trailers(order_by="id DESC")
    assert newest_first[0]["trailer_code"] == "TR-A"


def test_list_trailers_rejects_unknown_order(db):
    """Test order_by is restricted to known columns."""
    with pytest.raises(DatabaseError):
        db.list_trailers(order_by="trailer_code; DROP TABLE trailers")


def test_set_trailer_active(db):
    """Test status toggle and missing trailer."""
    trailer_id = save_default_trailer(db)

    assert db.set_trailer_active(trailer_id, True) is True
    assert db.get_trailer(trailer_id)["active"] is True
    assert db.set_trailer_active(999, True) is False


def test_replace_and_get_compartments(db):
    """Test compartments are stored with products, ordered by number."""
    trailer_id = save_default_trailer(db)

    saved = db.replace_compartments(
        trailer_id,
        [
            compartment_row("c2", 2, products=["LPG"]),
            compartment_row("c1", 1, capacity=7000, products=["Diesel", "AdBlue"]),
        ],
        active=True,
    )

    assert saved is True
    compartments = db.get_compartments(trailer_id)
    assert [c["compartment_no"] for c in compartments] == [1, 2]
    assert compartments[0]["id"] == "c1"
    assert compartments[0]["capacity"] == 7000
    assert sorted(compartments[0]["allowed_products"]) == ["AdBlue", "Diesel"]
    assert compartments[0]["partial_load_allowed"] is True
    assert compartments[0]["must_use"] is False
    assert db.get_trailer(trailer_id)["active"] is True


def test_replace_compartments_overwrites(db):
    """Test replacing drops compartments no longer present."""
    trailer_id = save_default_trailer(db)
    db.replace_compartments(trailer_id, [compartment_row("c1", 1), compartment_row("c2", 2)], active=True)

    db.replace_compartments(trailer_id, [compartment_row("c2", 2)], active=False)

    compartments = db.get_compartments(trailer_id)
    assert [c["id"] for c in compartments] == ["c2"]
    assert db.get_trailer(trailer_id)["active"] is False


def test_replace_compartments_unknown_trailer(db):
    """Test replacing on a missing trailer returns False."""
    assert db.replace_compartments(999, [compartment_row("c1", 1)], active=True) is False


def test_replace_compartments_rolls_back_on_error(db):
    """Test a bad row leaves the stored compartments untouched."""
    trailer_id = save_default_trailer(db)
    db.replace_compartments(trailer_id, [compartment_row("c1", 1)], active=True)

    with pytest.raises(DatabaseError):
        db.replace_compartments(
            trailer_id,
            [compartment_row("c1", 1), compartment_row("c2", 1)],  # Duplicate number
            active=True,
        )

    compartments = db.get_compartments(trailer_id)
    assert [c["id"] for c in compartments] == ["c1"]
    assert db.get_trailer(trailer_id)["active"] is True


def test_delete_trailer_cascades(db):
    """Test deleting a trailer removes its compartments."""
    trailer_id = save_default_trailer(db)
    db.replace_compartments(trailer_id, [compartment_row("c1", 1, products=["Diesel"])], active=True)

    assert db.delete_trailer(trailer_id) is True
    assert db.get_trailer(trailer_id) is None
    assert db.get_compartments(trailer_id) == []
    assert db.delete_trailer(trailer_id) is False


def test_in_memory_database():
    """Test ':memory:' databases work without a directory."""
    db = create_database("sqlite", path=":memory:")
    trailer_id = save_default_trailer(db)
    assert db.get_trailer(trailer_id) is not None
    db.close()
