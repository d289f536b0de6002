"""
Import Operations.

Bulk import of trailer compartments from Excel/CSV sheets.

- import_compartments() - Parse + clean a sheet (pure, no database access)
- apply_compartment_import() - Run rows through add_compartment (pure)
- import_trailer_compartments() - Parse, apply and save for a stored trailer
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Dict, Any, Optional

from data.interface import DatabaseInterface
from services.excel_reader import ExcelReader, SPREADSHEET_EXTENSIONS
from domain.models import Trailer, CompartmentFields, CompartmentChange
from domain.rules import AVAILABLE_PRODUCTS, missing_compartment_numbers
from domain.exceptions import ImportValidationError, ValidationError
from domain.validators import (
    validate_file_path,
    validate_volume,
    validate_compartment_no,
    validate_allowed_products,
)
from operations.compartment_ops import add_compartment, apply_change
from operations.trailer_ops import get_trailer, save_compartment_change

logger = logging.getLogger(__name__)

ALL_PRODUCTS_KEYWORDS = {"all", "all products", "*"}


@dataclass
class ImportResult:
    """
    Outcome of a compartment import.

    Failed rows do not stop the import - they are collected with their
    error message and the remaining rows are still applied.
    """

    change: Optional[CompartmentChange] = None
    imported_rows: List[int] = field(default_factory=list)
    failed_rows: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def imported_count(self) -> int:
        return len(self.imported_rows)

    @property
    def failed_count(self) -> int:
        return len(self.failed_rows)


def import_compartments(file_path: Path, sheet_name: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Import compartments from an Excel or CSV sheet.

    This is a PURE FUNCTION - no database access, no side effects.
    Returns cleaned compartment rows that can be applied to a trailer.

    Defaults for empty cells: min volume 0, max volume = capacity,
    partial load allowed, not must use. "All" in the products column
    means every known product.

    Rows with unreadable values are returned with an 'error' key instead
    of being dropped, so the user can see why they were not imported.

    Args:
        file_path: Path to spreadsheet (.xlsx, .xls or .csv)
        sheet_name: Sheet to read (None = first sheet)

    Returns:
        List of compartment dicts with keys: row, compartment_no (or None),
        capacity, min_volume, max_volume, allowed_products,
        partial_load_allowed, must_use (and 'error' for bad rows)

    Raises:
        ImportValidationError: If the file cannot be read or has no rows

    Example:
        >>> rows = import_compartments(Path("compartments.xlsx"))
        >>> result = apply_compartment_import(trailer, rows)
    """
    logger.info(f"Importing compartments from: {file_path}")

    validate_file_path(file_path, must_exist=True, allowed_extensions=SPREADSHEET_EXTENSIONS)

    reader = ExcelReader(file_path)
    raw_rows = reader.read_compartments(sheet_name=sheet_name)

    rows = [_clean_compartment_row(raw) for raw in raw_rows]

    if not rows:
        raise ImportValidationError(
            "No compartments found in the sheet",
            details={"file": str(file_path)},
        )

    bad = sum(1 for r in rows if "error" in r)
    logger.info(f"Parsed {len(rows)} compartment rows ({bad} with errors)")
    return rows


def _clean_compartment_row(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a raw sheet row to typed values, keeping errors in the row."""
    row = {"row": raw.get("row")}
    if "error" in raw:
        row["error"] = raw["error"]
        return row

    try:
        capacity = validate_volume(raw.get("capacity"), field_name="capacity")
        # Empty number cell means "next free number"; 0 is an error, not empty
        number_cell = raw.get("compartment_no")
        if isinstance(number_cell, str):
            number_cell = number_cell.strip() or None
        row.update({
            "compartment_no": None if number_cell is None else validate_compartment_no(number_cell),
            "capacity": capacity,
            "min_volume": validate_volume(raw.get("min_volume"), field_name="min_volume"),
            "max_volume": (
                capacity if raw.get("max_volume") is None
                else validate_volume(raw.get("max_volume"), field_name="max_volume")
            ),
            "allowed_products": sorted(_expand_products(raw.get("allowed_products") or [])),
            "partial_load_allowed": bool(raw.get("partial_load_allowed", True)),
            "must_use": bool(raw.get("must_use", False)),
        })
    except ValidationError as e:
        logger.warning(f"Row {row['row']}: {e}")
        row["error"] = str(e)

    return row


def _expand_products(products: List[str]):
    """Expand 'All' into every known product."""
    if any(p.strip().lower() in ALL_PRODUCTS_KEYWORDS for p in products):
        return set(AVAILABLE_PRODUCTS)
    return validate_allowed_products(products)


def apply_compartment_import(trailer: Trailer, rows: List[Dict[str, Any]]) -> ImportResult:
    """
    Add imported rows to a trailer, in sheet order.

    Each row goes through add_compartment(), so the usual volume rules,
    numbering and duplicate checks apply. Rows without a compartment
    number get the next free number.

    Args:
        trailer: Trailer to import into (not modified)
        rows: Rows from import_compartments()

    Returns:
        ImportResult with the combined change (None if nothing imported)
    """
    current = trailer
    result = ImportResult()

    for row in rows:
        if "error" in row:
            result.failed_rows.append({"row": row.get("row"), "error": row["error"]})
            continue

        fields = CompartmentFields(
            capacity=row["capacity"],
            min_volume=row["min_volume"],
            max_volume=row["max_volume"],
            allowed_products=frozenset(row["allowed_products"]),
            partial_load_allowed=row["partial_load_allowed"],
            must_use=row["must_use"],
            compartment_no=row["compartment_no"],
        )

        try:
            change = add_compartment(current, fields)
        except ValidationError as e:
            logger.warning(f"Row {row.get('row')} not imported: {e.message}")
            result.failed_rows.append({"row": row.get("row"), "error": e.message})
            continue

        current = apply_change(current, change)
        result.imported_rows.append(row.get("row"))

    if result.imported_rows:
        result.change = CompartmentChange(
            compartments=list(current.compartments),
            active=current.active,
            missing_numbers=missing_compartment_numbers(current.compartments),
            activated=current.active and not trailer.active,
        )

    logger.info(
        f"Import into trailer {trailer.trailer_code}: "
        f"{result.imported_count} imported, {result.failed_count} failed"
    )
    return result


def import_trailer_compartments(
    db: DatabaseInterface,
    trailer_id: int,
    file_path: Path,
    sheet_name: Optional[str] = None,
) -> ImportResult:
    """
    Import compartments from a sheet into a stored trailer and save.

    Nothing is saved if no row could be imported.

    Raises:
        ImportValidationError: If the file cannot be read
        NotFoundError: If the trailer does not exist
    """
    trailer = get_trailer(db, trailer_id)
    rows = import_compartments(file_path, sheet_name=sheet_name)
    result = apply_compartment_import(trailer, rows)

    if result.change is not None:
        save_compartment_change(db, trailer_id, result.change)

    return result


def get_import_summary(result: ImportResult) -> Dict[str, Any]:
    """
    Summarize an import for display.

    Returns:
        Dict with imported, failed, errors (list of "Row N: message"),
        active and missing (numbers missing after import)
    """
    change = result.change
    return {
        "imported": result.imported_count,
        "failed": result.failed_count,
        "errors": [f"Row {f['row']}: {f['error']}" for f in result.failed_rows],
        "active": change.active if change else None,
        "missing": change.missing_numbers if change else [],
    }
