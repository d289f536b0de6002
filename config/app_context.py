"""
Application Context for fleet compartments.

Centralized application state and dependency injection.
"""

from dataclasses import dataclass, field, replace
from typing import Optional
from pathlib import Path

from data.interface import DatabaseInterface
from .settings import Settings, get_settings


@dataclass
class AppContext:
    """
    Centralized application context.

    Holds the database, settings and the trailer currently being edited.
    Passed to operations instead of relying on global state.

    Example:
        >>> from data import create_database
        >>> db = create_database("sqlite", path="./fleet.db")
        >>> ctx = create_app_context(database=db)
        >>> ctx = ctx.with_trailer(trailer_id=1, trailer_code="TR-001")
        >>> trailer = get_trailer(ctx.database, ctx.require_trailer())
    """

    # Core dependencies (required)
    database: DatabaseInterface
    settings: Settings = field(default_factory=get_settings)

    # Application state (optional)
    current_trailer_id: Optional[int] = None
    current_trailer_code: Optional[str] = None

    # User info
    user_name: str = field(default_factory=lambda: get_settings().user_name)

    @property
    def data_dir(self) -> Path:
        """Get data directory from settings."""
        return self.settings.data_dir

    def with_trailer(self, trailer_id: int, trailer_code: Optional[str] = None) -> "AppContext":
        """
        Create new context with trailer set.

        Immutable pattern - returns new instance instead of modifying self.
        """
        return replace(
            self,
            current_trailer_id=trailer_id,
            current_trailer_code=trailer_code,
        )

    def clear_trailer(self) -> "AppContext":
        """Create new context with no trailer selected."""
        return replace(self, current_trailer_id=None, current_trailer_code=None)

    def has_trailer(self) -> bool:
        """Check if a trailer is currently selected."""
        return self.current_trailer_id is not None

    def require_trailer(self) -> int:
        """
        Get current trailer ID or raise error.

        Raises:
            ValueError: If no trailer is selected
        """
        if not self.has_trailer():
            raise ValueError(
                "No trailer selected. Please select a trailer first."
            )
        return self.current_trailer_id


def create_app_context(
    database: DatabaseInterface,
    settings: Optional[Settings] = None,
    user_name: Optional[str] = None,
) -> AppContext:
    """
    Factory function to create AppContext.

    Args:
        database: Database instance (required)
        settings: Settings instance (defaults to global settings)
        user_name: User name (defaults to settings.user_name)

    Returns:
        AppContext instance
    """
    if settings is None:
        settings = get_settings()

    if user_name is None:
        user_name = settings.user_name

    return AppContext(
        database=database,
        settings=settings,
        user_name=user_name,
    )
