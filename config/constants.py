"""
Application constants for fleet compartments.

Centralized location for all application-wide constants.
"""

# ==================== Application Info ====================

APP_NAME = "Fleet Compartments"
APP_VERSION = "1.0.0"

# ==================== Default Values ====================

# Database filename (actual path computed by paths.get_database_path())
DEFAULT_DATABASE_NAME = "fleet.db"
FLEET_DATA_DIRNAME = "fleet_data"
DEFAULT_USER_NAME = "user"
DEFAULT_LOG_LEVEL = "INFO"
