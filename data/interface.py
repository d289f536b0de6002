"""
Database Interface - Abstract Base Class for database operations.

This module defines the contract for all database implementations.
Any database backend (SQLite, PostgreSQL, etc.) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Dict, Any


class DatabaseInterface(ABC):
    """
    Abstract base class for database operations.

    This interface defines all methods required for managing:
    - Trailers and their status
    - Compartments (owned by exactly one trailer)
    """

    # ==================== Trailer Operations ====================

    @abstractmethod
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
        """
        Save or update a trailer.

        Args:
            trailer_name: Display name
            trailer_code: Unique code (ignored on update - immutable)
            registration_number: Licence plate
            volume_capacity: Total volume in liters
            weight_capacity: Max weight in kg
            haulier_company: Owning haulier (optional)
            active: Trailer status
            trailer_id: If provided, update existing trailer; otherwise create new

        Returns:
            int: Trailer ID (newly created or existing)
        """
        pass

    @abstractmethod
    def get_trailer(self, trailer_id: int) -> Optional[Dict[str, Any]]:
        """
        Get trailer by ID.

        Returns:
            Dict containing trailer data, or None if not found.
            Expected keys: id, trailer_name, trailer_code, registration_number,
                          volume_capacity, weight_capacity, haulier_company,
                          active, created_at, updated_at
        """
        pass

    @abstractmethod
    def get_trailer_by_code(self, trailer_code: str) -> Optional[Dict[str, Any]]:
        """Get trailer by its unique code, or None if not found."""
        pass

    @abstractmethod
    def list_trailers(
        self,
        active_only: bool = False,
        order_by: str = "trailer_code",
    ) -> List[Dict[str, Any]]:
        """
        List trailers.

        Args:
            active_only: Only return active trailers
            order_by: SQL ORDER BY clause (e.g., "trailer_code")

        Returns:
            List of trailer dictionaries
        """
        pass

    @abstractmethod
    def set_trailer_active(self, trailer_id: int, active: bool) -> bool:
        """
        Set trailer status.

        Returns:
            bool: True if updated, False if trailer not found
        """
        pass

    @abstractmethod
    def delete_trailer(self, trailer_id: int) -> bool:
        """
        Delete a trailer and all its compartments.

        Returns:
            bool: True if deleted, False if trailer not found
        """
        pass

    # ==================== Compartment Operations ====================

    @abstractmethod
    def get_compartments(self, trailer_id: int) -> List[Dict[str, Any]]:
        """
        Get compartments for a trailer in ascending compartment_no order.

        Returns:
            List of compartment dicts with keys: id, trailer_id, compartment_no,
            capacity, min_volume, max_volume, partial_load_allowed, must_use,
            allowed_products (sorted list of product names)
        """
        pass

    @abstractmethod
    def replace_compartments(
        self,
        trailer_id: int,
        compartments: List[Dict[str, Any]],
        active: bool,
    ) -> bool:
        """
        Replace all compartments of a trailer and set its status.

        Runs as one transaction - either everything is saved or nothing.

        Args:
            trailer_id: Trailer owning the compartments
            compartments: Compartment dicts (same keys as get_compartments)
            active: Derived trailer status

        Returns:
            bool: True if saved, False if trailer not found
        """
        pass

    # ==================== Lifecycle ====================

    @abstractmethod
    def close(self):
        """Close database connection."""
        pass
