"""
Path Configuration for fleet compartments.

Centralized path management for the database.
"""

from pathlib import Path
import logging
import sys

from .constants import DEFAULT_DATABASE_NAME, FLEET_DATA_DIRNAME

logger = logging.getLogger(__name__)


def get_app_root() -> Path:
    """
    Get application root directory.

    Returns:
        - Frozen build: Directory where the executable is located
        - Development (script): Project root
    """
    if getattr(sys, 'frozen', False):
        app_root = Path(sys.executable).parent
        logger.debug(f"Running as executable, app root: {app_root}")
    else:
        # __file__ = .../config/paths.py -> parent.parent = project root
        app_root = Path(__file__).parent.parent
        logger.debug(f"Running as script, app root: {app_root}")

    return app_root


def get_data_base_path() -> Path:
    """
    Get base path for application data.

    Structure (relative to executable or project root):
        {app_root}/
        └── fleet_data/
            └── fleet.db

    Returns:
        Path to data directory (creates if doesn't exist)
    """
    data_path = get_app_root() / FLEET_DATA_DIRNAME
    data_path.mkdir(parents=True, exist_ok=True)
    return data_path


def get_database_path() -> Path:
    """
    Get database file path.

    Database is stored in the data directory for portability:
    copying fleet_data/ moves every trailer and compartment.

    Returns:
        Path to database file
    """
    db_path = get_data_base_path() / DEFAULT_DATABASE_NAME
    logger.debug(f"Database path: {db_path}")
    return db_path
