"""
Business rules for trailer compartments.

These functions encode business logic and decision-making rules.
They are pure functions with no side effects.
"""

from typing import Iterable, List, Union

from .models import Compartment


# Products a compartment can be configured to carry
AVAILABLE_PRODUCTS = [
    "Diesel",
    "Petrol Unleaded",
    "Petrol Super",
    "Heating Oil",
    "Kerosene",
    "AdBlue",
    "Biodiesel",
    "LPG",
]

NumberedItem = Union[Compartment, int]


def _compartment_numbers(compartments: Iterable[NumberedItem]) -> List[int]:
    """Sorted compartment numbers (accepts compartments or plain ints)."""
    return sorted(
        c if isinstance(c, int) else c.compartment_no
        for c in compartments
    )


def next_compartment_number(compartments: Iterable[NumberedItem]) -> int:
    """
    Get the compartment number a new compartment should get.

    Fills the lowest gap in the existing sequence first.

    Examples:
        {1, 2, 4} -> 3
        {1, 2, 3} -> 4
        {}        -> 1

    Args:
        compartments: Existing compartments (any order)

    Returns:
        Lowest positive integer not already used
    """
    existing = set(_compartment_numbers(compartments))
    candidate = 1
    while candidate in existing:
        candidate += 1
    return candidate


def is_sequential(compartments: Iterable[NumberedItem]) -> bool:
    """
    Check if compartment numbers are exactly 1..N.

    True for an empty set; callers combine this with a count check
    before deciding the trailer status.
    """
    numbers = _compartment_numbers(compartments)
    return numbers == list(range(1, len(numbers) + 1))


def missing_compartment_numbers(compartments: Iterable[NumberedItem]) -> List[int]:
    """
    Get numbers missing from the sequence 1..max(compartment_no).

    Used for user-facing warnings only - gaps are never repaired
    automatically.

    Args:
        compartments: Existing compartments

    Returns:
        Missing numbers in ascending order (empty if none)
    """
    numbers = _compartment_numbers(compartments)
    if not numbers:
        return []
    present = set(numbers)
    return [n for n in range(1, numbers[-1] + 1) if n not in present]


def derive_trailer_active(compartments: Iterable[NumberedItem]) -> bool:
    """
    Derive trailer status from its compartments.

    A trailer is active only with at least one compartment and
    sequential numbering.
    """
    numbers = _compartment_numbers(compartments)
    return bool(numbers) and is_sequential(numbers)


def sort_compartments(compartments: Iterable[Compartment]) -> List[Compartment]:
    """Return compartments in ascending compartment_no order."""
    return sorted(compartments, key=lambda c: c.compartment_no)


def total_capacity(compartments: Iterable[Compartment]) -> int:
    """Sum of compartment capacities in liters."""
    return sum(c.capacity for c in compartments)


def is_all_products(products: Iterable[str]) -> bool:
    """Check if every known product is allowed."""
    return set(AVAILABLE_PRODUCTS).issubset(set(products))


def describe_allowed_products(products: Iterable[str]) -> str:
    """
    User-friendly description of allowed products.

    Returns:
        "No products assigned", "All Products", or products joined
        in the order of AVAILABLE_PRODUCTS (unknown products last)
    """
    product_set = set(products)
    if not product_set:
        return "No products assigned"
    if is_all_products(product_set):
        return "All Products"

    known = [p for p in AVAILABLE_PRODUCTS if p in product_set]
    unknown = sorted(product_set - set(AVAILABLE_PRODUCTS))
    return ", ".join(known + unknown)


def describe_loading_mode(partial_load_allowed: bool, must_use: bool) -> str:
    """Describe the volume logic that applies to a compartment."""
    if not partial_load_allowed and must_use:
        return "Must load full capacity - Min/Max will equal capacity."
    if partial_load_allowed and must_use:
        return "Must use compartment but partial loads allowed - Min volume must be greater than 0."
    if partial_load_allowed:
        return "Flexible loading - Min can be 0, Max up to capacity."
    return "Standard configuration - Manual volume control."


def compartment_badges(compartment: Compartment) -> List[str]:
    """
    Badges shown on a compartment card.

    Examples:
        partial + must use -> ["Partial Load OK", "Must Use"]
        neither            -> ["Standard Configuration"]
    """
    badges = []
    if compartment.partial_load_allowed:
        badges.append("Partial Load OK")
    if compartment.must_use:
        badges.append("Must Use")
    if not badges:
        badges.append("Standard Configuration")
    return badges
