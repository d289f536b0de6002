"""
Custom exceptions for the fleet compartments package.

All exceptions inherit from FleetBaseException for easier catching.
Each exception includes a message and optional details dict.
"""


class FleetBaseException(Exception):
    """Base exception for all fleet-related errors."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            details: Optional dict with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """String representation with details if available."""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class DatabaseError(FleetBaseException):
    """Database operation failed."""
    pass


class ImportValidationError(FleetBaseException):
    """Import file validation failed."""
    pass


class ValidationError(FleetBaseException):
    """Data validation failed."""
    pass


class NotFoundError(FleetBaseException):
    """Requested resource not found."""
    pass


# ==================== Compartment Validation ====================


class CompartmentValidationError(ValidationError):
    """A compartment's volume settings were rejected."""
    pass


class CapacityRequired(CompartmentValidationError):
    """Capacity is missing or not greater than 0."""
    pass


class MinExceedsCapacity(CompartmentValidationError):
    """Minimum volume is larger than capacity."""
    pass


class MaxExceedsCapacity(CompartmentValidationError):
    """Maximum volume is larger than capacity."""
    pass


class MinExceedsMax(CompartmentValidationError):
    """Minimum volume is larger than maximum volume."""
    pass


class DuplicateCompartmentNumber(ValidationError):
    """Compartment number is already used on the trailer."""
    pass


class TrailerActivationError(ValidationError):
    """Trailer cannot be activated with its current compartments."""
    pass
