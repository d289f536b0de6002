"""
Unit tests for ExcelReader service.

Tests cover column matching, cell parsing and error reporting for
compartment sheets.
"""

import pytest
import pandas as pd

from services.excel_reader import ExcelReader
from domain.exceptions import ImportValidationError, ValidationError


@pytest.fixture
def compartment_sheet(tmp_path):
    """Create a compartment sheet with every supported column."""
    file_path = tmp_path / "compartments.xlsx"
    df = pd.DataFrame({
        "Compartment No": [1, 2, None],
        "Capacity": [5000, 3000, 2000],
        "Min Volume": [0, 100, None],
        "Max Volume": [5000, None, 2000],
        "Allowed Products": ["Diesel, LPG", "AdBlue; Kerosene", None],
        "Partial Load Allowed": ["No", "yes", None],
        "Must Use": ["Yes", "n", None],
    })
    df.to_excel(file_path, index=False)
    return file_path


def test_read_compartments(compartment_sheet):
    """Test every column is found and parsed."""
    rows = ExcelReader(compartment_sheet).read_compartments()

    assert len(rows) == 3
    first = rows[0]
    assert first["row"] == 2  # Header is row 1
    assert first["compartment_no"] == 1
    assert first["capacity"] == 5000
    assert first["allowed_products"] == ["Diesel", "LPG"]
    assert first["partial_load_allowed"] is False
    assert first["must_use"] is True

    assert rows[1]["allowed_products"] == ["AdBlue", "Kerosene"]
    assert rows[1]["max_volume"] is None
    assert rows[1]["partial_load_allowed"] is True
    assert rows[1]["must_use"] is False


def test_empty_cells_use_defaults(compartment_sheet):
    """Test empty yes/no cells fall back to partial=True, must_use=False."""
    rows = ExcelReader(compartment_sheet).read_compartments()

    last = rows[2]
    assert last["compartment_no"] is None
    assert last["min_volume"] is None
    assert last["allowed_products"] == []
    assert last["partial_load_allowed"] is True
    assert last["must_use"] is False


def test_rows_without_capacity_skipped(tmp_path):
    """Test rows missing capacity are skipped, row numbers stay correct."""
    file_path = tmp_path / "gaps.xlsx"
    pd.DataFrame({
        "Compartment No": [1, 2, 3],
        "Capacity": [5000, None, 4000],
    }).to_excel(file_path, index=False)

    rows = ExcelReader(file_path).read_compartments()

    assert [r["row"] for r in rows] == [2, 4]
    assert [r["capacity"] for r in rows] == [5000, 4000]


def test_unreadable_yes_no_kept_as_error(tmp_path):
    """Test bad yes/no values are reported on the row."""
    file_path = tmp_path / "bad.xlsx"
    pd.DataFrame({
        "Capacity": [5000],
        "Must Use": ["maybe"],
    }).to_excel(file_path, index=False)

    rows = ExcelReader(file_path).read_compartments()

    assert len(rows) == 1
    assert "maybe" in rows[0]["error"]


def test_missing_capacity_column(tmp_path):
    """Test the capacity column is required."""
    file_path = tmp_path / "no_capacity.xlsx"
    pd.DataFrame({"Compartment No": [1], "Max Volume": [1000]}).to_excel(file_path, index=False)

    with pytest.raises(ImportValidationError) as exc_info:
        ExcelReader(file_path).read_compartments()

    assert "Capacity" in str(exc_info.value)


def test_alternative_column_names(tmp_path):
    """Test column variants are matched case-insensitively."""
    file_path = tmp_path / "variants.xlsx"
    pd.DataFrame({
        "FACK": [1],
        "kapacitet": [6000],
        "max": [5500],
        "Products": ["Diesel"],
        "Mandatory": ["x"],
    }).to_excel(file_path, index=False)

    rows = ExcelReader(file_path).read_compartments()

    assert rows[0]["compartment_no"] == 1
    assert rows[0]["capacity"] == 6000
    assert rows[0]["max_volume"] == 5500
    assert rows[0]["allowed_products"] == ["Diesel"]
    assert rows[0]["must_use"] is True


def test_read_csv(tmp_path):
    """Test CSV sheets are read with delimiter detection."""
    file_path = tmp_path / "compartments.csv"
    file_path.write_text(
        "Compartment No,Capacity,Min Volume,Max Volume\n"
        "1,5000,0,5000\n"
        "2,3000,0,2500\n"
    )

    rows = ExcelReader(file_path).read_compartments()

    assert [r["compartment_no"] for r in rows] == [1, 2]
    assert rows[1]["max_volume"] == 2500


def test_get_sheet_names(tmp_path):
    """Test sheet names for Excel, none for CSV."""
    file_path = tmp_path / "multi.xlsx"
    with pd.ExcelWriter(file_path) as writer:
        pd.DataFrame({"Capacity": [1]}).to_excel(writer, sheet_name="Trailer A", index=False)
        pd.DataFrame({"Capacity": [2]}).to_excel(writer, sheet_name="Trailer B", index=False)

    reader = ExcelReader(file_path)

    assert reader.get_sheet_names() == ["Trailer A", "Trailer B"]
    assert reader.read_compartments(sheet_name="Trailer B")[0]["capacity"] == 2


def test_invalid_file_type(tmp_path):
    """Test unsupported extensions are rejected."""
    file_path = tmp_path / "compartments.txt"
    file_path.write_text("Capacity\n1000\n")

    with pytest.raises(ValidationError):
        ExcelReader(file_path)


def test_unreadable_file(tmp_path):
    """Test a corrupt workbook raises ImportValidationError."""
    file_path = tmp_path / "broken.xlsx"
    file_path.write_text("not a workbook")

    with pytest.raises(ImportValidationError):
        ExcelReader(file_path).read_dataframe()
