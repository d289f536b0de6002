"""
Domain models for fleet compartments.

These dataclasses represent the core business entities.
They are framework-agnostic and have no dependencies on database or UI.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, FrozenSet


@dataclass(frozen=True)
class CompartmentFields:
    """
    Editable fields of a compartment (the add/edit form).

    Volumes are whole liters.
    """

    capacity: int
    min_volume: int = 0
    max_volume: int = 0
    allowed_products: FrozenSet[str] = frozenset()
    partial_load_allowed: bool = True
    must_use: bool = False
    compartment_no: Optional[int] = None

    def __post_init__(self):
        """Normalize allowed_products to a frozenset."""
        if not isinstance(self.allowed_products, frozenset):
            object.__setattr__(self, "allowed_products", frozenset(self.allowed_products or ()))


@dataclass(frozen=True)
class Compartment:
    """
    A compartment owned by exactly one trailer.

    Only created through the compartment operations, which guarantee
    the volume invariants hold.
    """

    id: str
    compartment_no: int
    capacity: int
    min_volume: int
    max_volume: int
    allowed_products: FrozenSet[str] = frozenset()
    partial_load_allowed: bool = True
    must_use: bool = False

    def __post_init__(self):
        """Validate compartment identity."""
        if not self.id:
            raise ValueError("id cannot be empty")
        if self.compartment_no < 1:
            raise ValueError("compartment_no must be positive")
        if not isinstance(self.allowed_products, frozenset):
            object.__setattr__(self, "allowed_products", frozenset(self.allowed_products or ()))

    @property
    def fields(self) -> CompartmentFields:
        """Editable fields of this compartment."""
        return CompartmentFields(
            capacity=self.capacity,
            min_volume=self.min_volume,
            max_volume=self.max_volume,
            allowed_products=self.allowed_products,
            partial_load_allowed=self.partial_load_allowed,
            must_use=self.must_use,
            compartment_no=self.compartment_no,
        )


@dataclass
class Trailer:
    """
    Trailer aggregate.

    Owns its compartments. The active flag is derived from the
    compartment numbering and overwritten on every compartment change.
    """

    trailer_name: str
    trailer_code: str  # Immutable after creation
    registration_number: str
    volume_capacity: int = 0  # liters
    weight_capacity: int = 0  # kg
    haulier_company: Optional[str] = None
    active: bool = False
    compartments: List[Compartment] = field(default_factory=list)
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate trailer data after initialization."""
        if not self.trailer_name:
            raise ValueError("trailer_name cannot be empty")
        if not self.trailer_code:
            raise ValueError("trailer_code cannot be empty")
        if not self.registration_number:
            raise ValueError("registration_number cannot be empty")
        if self.volume_capacity < 0:
            raise ValueError("volume_capacity cannot be negative")
        if self.weight_capacity < 0:
            raise ValueError("weight_capacity cannot be negative")

    @property
    def number_of_compartments(self) -> int:
        """Number of compartments currently attached."""
        return len(self.compartments)

    @property
    def status_label(self) -> str:
        return "Active" if self.active else "Inactive"


@dataclass(frozen=True)
class CompartmentChange:
    """
    Result of adding or updating a compartment.

    Holds the new sorted compartment list and the derived active flag.
    Nothing is persisted - the caller saves both.
    """

    compartments: List[Compartment]
    active: bool
    missing_numbers: List[int] = field(default_factory=list)
    activated: bool = False  # Trailer went from inactive to active

    @property
    def is_sequential(self) -> bool:
        numbers = sorted(c.compartment_no for c in self.compartments)
        return numbers == list(range(1, len(numbers) + 1))


@dataclass(frozen=True)
class CompartmentRemoval(CompartmentChange):
    """
    Result of removing a compartment.

    gap_report lists the numbers missing from the sequence after the
    removal. It is a warning for the user, not an error.
    """

    gap_report: List[int] = field(default_factory=list)

    @property
    def has_gaps(self) -> bool:
        return bool(self.gap_report)
