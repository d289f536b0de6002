"""
Excel Reader Service.

Handles reading and parsing compartment sheets (one row per compartment)
from Excel (.xlsx/.xls) or CSV files.

Uses pandas and openpyxl for spreadsheet processing.
"""

import logging
from pathlib import Path
from typing import List, Dict, Any, Optional
import pandas as pd

from domain.exceptions import ImportValidationError
from domain.validators import validate_file_path

logger = logging.getLogger(__name__)

SPREADSHEET_EXTENSIONS = [".xlsx", ".xls", ".csv"]

# Column name mappings for flexible matching
COMPARTMENT_NO_VARIANTS = ['compartment no', 'compartment_no', 'compartment number', 'compartment', 'fack', 'no']
CAPACITY_VARIANTS = ['capacity', 'kapacitet']
MIN_VOLUME_VARIANTS = ['min volume', 'min_volume', 'minimum volume', 'min']
MAX_VOLUME_VARIANTS = ['max volume', 'max_volume', 'maximum volume', 'max']
PRODUCTS_VARIANTS = ['allowed products', 'allowed_products', 'products', 'product']
PARTIAL_LOAD_VARIANTS = ['partial load allowed', 'partial_load_allowed', 'partial load', 'partial']
MUST_USE_VARIANTS = ['must use', 'must_use', 'mandatory']

TRUE_VALUES = {"yes", "y", "true", "1", "x", "ja", "j"}
FALSE_VALUES = {"no", "n", "false", "0", "nej", ""}


class ExcelReader:
    """
    Spreadsheet reader for compartment sheets.

    This class provides methods to read and parse spreadsheet files into
    standardized dictionary formats.
    """

    def __init__(self, file_path: Path):
        """
        Initialize reader.

        Args:
            file_path: Path to spreadsheet (.xlsx, .xls or .csv)

        Raises:
            ValidationError: If file is invalid or doesn't exist
        """
        self.file_path = validate_file_path(
            file_path,
            must_exist=True,
            allowed_extensions=SPREADSHEET_EXTENSIONS,
        )
        logger.info(f"Initialized spreadsheet reader for: {self.file_path}")

    def _find_column(self, columns: List[str], search_terms: List[str]) -> Optional[str]:
        """
        Find column name using flexible matching.

        Tries exact match first, then partial match (case-insensitive).

        Args:
            columns: Available column names in DataFrame
            search_terms: List of possible column name variations to search for

        Returns:
            Matched column name, or None if not found
        """
        for term in search_terms:
            for col in columns:
                if term.lower() == str(col).strip().lower():
                    logger.debug(f"Found exact match: '{col}' for search term '{term}'")
                    return col

        for term in search_terms:
            # Very short terms only match exactly ("no" would match "Notes")
            if len(term) <= 3:
                continue
            for col in columns:
                if term.lower() in str(col).lower():
                    logger.debug(f"Found partial match: '{col}' contains '{term}'")
                    return col

        return None

    def read_dataframe(self, sheet_name: Optional[str] = None) -> pd.DataFrame:
        """
        Read spreadsheet into pandas DataFrame.

        Args:
            sheet_name: Sheet to read (None = first sheet, ignored for CSV)

        Returns:
            DataFrame with cleaned data

        Raises:
            ImportValidationError: If file cannot be read
        """
        try:
            if self.file_path.suffix.lower() == ".csv":
                df = pd.read_csv(self.file_path, sep=None, engine="python")
            else:
                df = pd.read_excel(self.file_path, sheet_name=sheet_name or 0)

            df = self._clean_dataframe(df)

            logger.debug(f"Read {len(df)} rows from {self.file_path.name}")
            return df

        except Exception as e:
            raise ImportValidationError(
                f"Could not read spreadsheet: {e}",
                details={"file": str(self.file_path), "error": str(e)},
            )

    def _clean_dataframe(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Clean DataFrame by removing empty rows and standardizing cells.

        Args:
            df: Input DataFrame

        Returns:
            Cleaned DataFrame
        """
        df = df.dropna(how="all")

        for col in df.columns:
            if pd.api.types.is_object_dtype(df[col]) or pd.api.types.is_string_dtype(df[col]):
                df[col] = df[col].map(lambda v: v.strip() if isinstance(v, str) else v)

        df = df.astype(object).where(pd.notnull(df), None)

        return df

    def _safe_str(self, value, default: str = "") -> str:
        """
        Convert value to string safely, handling None/NaN.

        Examples:
            >>> _safe_str(None) → ""
            >>> _safe_str("Diesel") → "Diesel"
            >>> _safe_str(12) → "12"
        """
        if value is None:
            return default
        if pd.isna(value):
            return default
        return str(value).strip()

    def _parse_bool(self, value, default: bool) -> bool:
        """Parse yes/no style cell values. Empty cells give the default."""
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return default
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text.endswith(".0"):
            text = text[:-2]
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return default if text == "" else False
        raise ImportValidationError(
            f"Cannot interpret '{value}' as yes/no",
            details={"value": value},
        )

    def _parse_products(self, value) -> List[str]:
        """Split a product cell on commas/semicolons."""
        text = self._safe_str(value)
        if not text:
            return []
        return [p.strip() for p in text.replace(";", ",").split(",") if p.strip()]

    def read_compartments(self, sheet_name: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Read a compartment sheet with flexible column matching.

        Automatically detects column names using common variations:
        - Capacity: 'capacity', 'kapacitet' (required)
        - Compartment No: 'compartment no', 'compartment', 'fack' (optional)
        - Min/Max Volume: 'min volume', 'max volume' (optional, default 0 / capacity)
        - Allowed Products: 'allowed products', 'products' (optional)
        - Partial Load Allowed / Must Use: yes/no columns (optional)

        Rows without a capacity are skipped. Per-row errors (unreadable
        yes/no values) are kept in the row under 'error' so the caller
        can report them.

        Returns:
            List of raw compartment dicts, one per row, with 'row' (1-based
            spreadsheet row number including header)

        Raises:
            ImportValidationError: If the capacity column cannot be found
        """
        df = self.read_dataframe(sheet_name=sheet_name)
        columns = list(df.columns)

        logger.info(f"Available columns in compartment sheet: {columns}")

        capacity_col = self._find_column(columns, CAPACITY_VARIANTS)
        if capacity_col is None:
            logger.error("Required column 'Capacity' not found")
            raise ImportValidationError(
                "Missing column in compartment sheet: Capacity",
                details={
                    "file": str(self.file_path),
                    "missing": ["Capacity"],
                    "available": columns,
                },
            )

        number_col = self._find_column(columns, COMPARTMENT_NO_VARIANTS)
        min_col = self._find_column(columns, MIN_VOLUME_VARIANTS)
        max_col = self._find_column(columns, MAX_VOLUME_VARIANTS)
        products_col = self._find_column(columns, PRODUCTS_VARIANTS)
        partial_col = self._find_column(columns, PARTIAL_LOAD_VARIANTS)
        must_use_col = self._find_column(columns, MUST_USE_VARIANTS)

        logger.info(f"Using columns - Capacity: '{capacity_col}', "
                    f"Number: '{number_col or 'N/A'}', "
                    f"Min: '{min_col or 'N/A'}', Max: '{max_col or 'N/A'}', "
                    f"Products: '{products_col or 'N/A'}'")

        rows = []
        for idx, row in df.iterrows():
            # +2: header row and 1-based numbering
            row_number = int(idx) + 2
            capacity = row.get(capacity_col)
            if capacity is None or self._safe_str(capacity) == "":
                logger.warning(f"Skipping row {row_number}: No capacity")
                continue

            item = {
                "row": row_number,
                "compartment_no": row.get(number_col) if number_col else None,
                "capacity": capacity,
                "min_volume": row.get(min_col) if min_col else None,
                "max_volume": row.get(max_col) if max_col else None,
                "allowed_products": self._parse_products(row.get(products_col)) if products_col else [],
            }

            try:
                item["partial_load_allowed"] = self._parse_bool(
                    row.get(partial_col) if partial_col else None, default=True
                )
                item["must_use"] = self._parse_bool(
                    row.get(must_use_col) if must_use_col else None, default=False
                )
            except ImportValidationError as e:
                logger.warning(f"Row {row_number}: {e}")
                item["error"] = str(e)

            rows.append(item)

        logger.info(f"Parsed {len(rows)} compartments from {self.file_path.name}")
        return rows

    def get_sheet_names(self) -> List[str]:
        """
        Get list of sheet names in an Excel file (CSV has none).

        Returns:
            List of sheet names
        """
        if self.file_path.suffix.lower() == ".csv":
            return []
        try:
            excel_file = pd.ExcelFile(self.file_path)
            return excel_file.sheet_names
        except Exception as e:
            raise ImportValidationError(
                f"Could not read sheet names: {e}",
                details={"file": str(self.file_path)},
            )
