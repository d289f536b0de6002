"""
Services layer for fleet compartments.

Infrastructure services that support the operations layer.
"""

from .excel_reader import ExcelReader, SPREADSHEET_EXTENSIONS

__all__ = [
    # Excel Reader
    "ExcelReader",
    "SPREADSHEET_EXTENSIONS",
]
