"""
SQLite implementation of DatabaseInterface.

This module provides a complete SQLite implementation of the database interface,
including automatic migrations and connection management.
"""

import sqlite3
import logging
from pathlib import Path
from typing import List, Optional, Dict, Any, Union

from .interface import DatabaseInterface
from . import queries as Q
from domain.exceptions import DatabaseError

logger = logging.getLogger(__name__)

TRAILER_ORDER_COLUMNS = {
    "trailer_code",
    "trailer_name",
    "registration_number",
    "created_at",
    "updated_at",
    "id",
}


class SQLiteDatabase(DatabaseInterface):
    """
    SQLite implementation of DatabaseInterface.

    Features:
    - Automatic migrations on initialization
    - Row factory for dict conversion
    - ACID transactions for compartment replacement
    - Foreign key enforcement (compartments cascade with trailer)
    """

    def __init__(self, db_path: Union[Path, str]):
        """
        Initialize SQLite database.

        Args:
            db_path: Path to SQLite database file (created if not exists),
                     or ":memory:" for an in-memory database
        """
        self.db_path = Path(db_path)
        if str(db_path) != ":memory:":
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")

        self._run_migrations()
        logger.info(f"SQLite database initialized at {self.db_path}")

    def _row_to_dict(self, row: sqlite3.Row) -> Optional[Dict[str, Any]]:
        """Convert sqlite3.Row to dictionary."""
        return dict(row) if row else None

    def _rows_to_dicts(self, rows: List[sqlite3.Row]) -> List[Dict[str, Any]]:
        """Convert list of sqlite3.Row to list of dicts."""
        return [dict(row) for row in rows]

    def _trailer_row_to_dict(self, row: sqlite3.Row) -> Optional[Dict[str, Any]]:
        trailer = self._row_to_dict(row)
        if trailer is not None:
            trailer["active"] = bool(trailer["active"])
        return trailer

    def _run_migrations(self):
        """
        Run all SQL migration files in order, tracking which have been applied.

        Uses schema_migrations table to track applied migrations and prevent
        re-running them on an existing database.
        """
        migrations_dir = Path(__file__).parent / "migrations"
        migration_files = sorted(migrations_dir.glob("*.sql"))

        # Tracking table must exist before anything else
        tracking_migration = migrations_dir / "000_migration_tracking.sql"
        if tracking_migration.exists():
            self.conn.executescript(tracking_migration.read_text())
            self.conn.commit()

        cursor = self.conn.cursor()
        cursor.execute("SELECT migration_name FROM schema_migrations")
        applied_migrations = {row[0] for row in cursor.fetchall()}

        migrations_run = 0
        for migration_file in migration_files:
            migration_name = migration_file.name

            if migration_name in applied_migrations:
                logger.debug(f"Skipping already-applied migration: {migration_name}")
                continue

            logger.debug(f"Running migration: {migration_name}")
            sql = migration_file.read_text()

            try:
                self.conn.executescript(sql)
                cursor.execute(
                    "INSERT OR IGNORE INTO schema_migrations (migration_name) VALUES (?)",
                    (migration_name,)
                )
                self.conn.commit()
                migrations_run += 1
                logger.info(f"Applied migration: {migration_name}")

            except sqlite3.OperationalError as e:
                if "duplicate column" in str(e).lower():
                    logger.warning(
                        f"Migration {migration_name} already applied (columns exist) - marking as applied"
                    )
                    cursor.execute(
                        "INSERT OR IGNORE INTO schema_migrations (migration_name) VALUES (?)",
                        (migration_name,)
                    )
                    self.conn.commit()
                else:
                    raise DatabaseError(
                        f"Migration {migration_name} failed: {e}",
                        details={"migration": migration_name},
                    )

        logger.info(f"Migration summary: {migrations_run} new, {len(applied_migrations)} already applied")

    # ==================== Trailer Operations ====================

    def save_trailer(
        self,
        trailer_name: str,
        trailer_code: str,
        registration_number: str,
        volume_capacity: int = 0,
        weight_capacity: int = 0,
        haulier_company: Optional[str] = None,
        active: bool = False,
        trailer_id: Optional[int] = None,
    ) -> int:
        """Save or update a trailer (trailer_code is never updated)."""
        try:
            cursor = self.conn.cursor()

            if trailer_id:
                cursor.execute(
                    Q.UPDATE_TRAILER,
                    (trailer_name, registration_number, volume_capacity,
                     weight_capacity, haulier_company, int(active), trailer_id),
                )
                self.conn.commit()
                return trailer_id

            cursor.execute(
                Q.INSERT_TRAILER,
                (trailer_name, trailer_code, registration_number, volume_capacity,
                 weight_capacity, haulier_company, int(active)),
            )
            new_trailer_id = cursor.lastrowid
            self.conn.commit()
            return new_trailer_id

        except sqlite3.IntegrityError as e:
            self.conn.rollback()
            raise DatabaseError(
                f"Trailer with trailer_code '{trailer_code}' already exists",
                details={"trailer_code": trailer_code, "error": str(e)},
            )
        except Exception as e:
            self.conn.rollback()
            raise DatabaseError(f"Failed to save trailer: {e}")

    def get_trailer(self, trailer_id: int) -> Optional[Dict[str, Any]]:
        """Get trailer by ID."""
        cursor = self.conn.cursor()
        cursor.execute(Q.SELECT_TRAILER_BY_ID, (trailer_id,))
        return self._trailer_row_to_dict(cursor.fetchone())

    def get_trailer_by_code(self, trailer_code: str) -> Optional[Dict[str, Any]]:
        """Get trailer by unique code."""
        cursor = self.conn.cursor()
        cursor.execute(Q.SELECT_TRAILER_BY_CODE, (trailer_code,))
        return self._trailer_row_to_dict(cursor.fetchone())

    def list_trailers(
        self,
        active_only: bool = False,
        order_by: str = "trailer_code",
    ) -> List[Dict[str, Any]]:
        """List trailers, optionally only active ones."""
        column, _, direction = order_by.partition(" ")
        if column not in TRAILER_ORDER_COLUMNS or direction.upper() not in ("", "ASC", "DESC"):
            raise DatabaseError(
                f"Invalid order_by: {order_by}",
                details={"allowed": sorted(TRAILER_ORDER_COLUMNS)},
            )

        query = Q.SELECT_ALL_TRAILERS.format(
            where="WHERE active = 1" if active_only else "",
            order_by=order_by,
        )
        cursor = self.conn.cursor()
        cursor.execute(query)
        return [self._trailer_row_to_dict(row) for row in cursor.fetchall()]

    def set_trailer_active(self, trailer_id: int, active: bool) -> bool:
        """Set trailer status."""
        cursor = self.conn.cursor()
        cursor.execute(Q.UPDATE_TRAILER_ACTIVE, (int(active), trailer_id))
        self.conn.commit()
        return cursor.rowcount > 0

    def delete_trailer(self, trailer_id: int) -> bool:
        """Delete a trailer; compartments cascade."""
        cursor = self.conn.cursor()
        cursor.execute(Q.DELETE_TRAILER, (trailer_id,))
        self.conn.commit()
        return cursor.rowcount > 0

    # ==================== Compartment Operations ====================

    def get_compartments(self, trailer_id: int) -> List[Dict[str, Any]]:
        """Get compartments in ascending compartment_no order, with products."""
        cursor = self.conn.cursor()

        cursor.execute(Q.SELECT_COMPARTMENTS_FOR_TRAILER, (trailer_id,))
        compartments = self._rows_to_dicts(cursor.fetchall())

        # All products for the trailer in one query
        cursor.execute(Q.SELECT_PRODUCTS_FOR_TRAILER, (trailer_id,))
        products_by_compartment: Dict[str, List[str]] = {}
        for row in cursor.fetchall():
            products_by_compartment.setdefault(row["compartment_id"], []).append(row["product_name"])

        for compartment in compartments:
            compartment["partial_load_allowed"] = bool(compartment["partial_load_allowed"])
            compartment["must_use"] = bool(compartment["must_use"])
            compartment["allowed_products"] = products_by_compartment.get(compartment["id"], [])

        return compartments

    def replace_compartments(
        self,
        trailer_id: int,
        compartments: List[Dict[str, Any]],
        active: bool,
    ) -> bool:
        """Replace all compartments of a trailer in one transaction."""
        cursor = self.conn.cursor()
        try:
            cursor.execute(Q.UPDATE_TRAILER_ACTIVE, (int(active), trailer_id))
            if cursor.rowcount == 0:
                self.conn.rollback()
                return False

            cursor.execute(Q.DELETE_COMPARTMENTS_FOR_TRAILER, (trailer_id,))

            for compartment in compartments:
                cursor.execute(
                    Q.INSERT_COMPARTMENT,
                    (
                        compartment["id"],
                        trailer_id,
                        compartment["compartment_no"],
                        compartment["capacity"],
                        compartment["min_volume"],
                        compartment["max_volume"],
                        int(compartment.get("partial_load_allowed", True)),
                        int(compartment.get("must_use", False)),
                    ),
                )
                cursor.executemany(
                    Q.INSERT_COMPARTMENT_PRODUCT,
                    [(compartment["id"], product)
                     for product in sorted(compartment.get("allowed_products") or [])],
                )

            self.conn.commit()
            logger.debug(f"Saved {len(compartments)} compartments for trailer {trailer_id}")
            return True

        except sqlite3.Error as e:
            self.conn.rollback()
            raise DatabaseError(
                f"Failed to save compartments: {e}",
                details={"trailer_id": trailer_id},
            )

    # ==================== Lifecycle ====================

    def close(self):
        """Close database connection."""
        if self.conn:
            self.conn.close()
            logger.info("Database connection closed")
