"""
Operations layer for fleet compartments.

Business logic operations - pure functions with dependency injection.
Compartment and import logic has no database access; trailer operations
receive the database as an argument.
"""

from .compartment_ops import (
    validate_compartment,
    add_compartment,
    update_compartment,
    remove_compartment,
    apply_change,
    new_compartment_id,
)

from .trailer_ops import (
    create_trailer,
    get_trailer,
    list_trailers,
    update_trailer_basic_info,
    set_trailer_status,
    delete_trailer,
    save_compartment_change,
    add_trailer_compartment,
    update_trailer_compartment,
    remove_trailer_compartment,
    get_compartment_summary,
)

from .import_ops import (
    ImportResult,
    import_compartments,
    apply_compartment_import,
    import_trailer_compartments,
    get_import_summary,
)

__all__ = [
    # Compartment Operations
    "validate_compartment",
    "add_compartment",
    "update_compartment",
    "remove_compartment",
    "apply_change",
    "new_compartment_id",
    # Trailer Operations
    "create_trailer",
    "get_trailer",
    "list_trailers",
    "update_trailer_basic_info",
    "set_trailer_status",
    "delete_trailer",
    "save_compartment_change",
    "add_trailer_compartment",
    "update_trailer_compartment",
    "remove_trailer_compartment",
    "get_compartment_summary",
    # Import Operations
    "ImportResult",
    "import_compartments",
    "apply_compartment_import",
    "import_trailer_compartments",
    "get_import_summary",
]
