"""
SQL queries as constants for better maintainability.

All queries are defined here to avoid SQL string literals scattered
throughout the codebase. This makes it easier to:
- Review SQL security
- Optimize queries
- Update schema changes
"""

# ==================== Trailer Queries ====================

INSERT_TRAILER = """
    INSERT INTO trailers (trailer_name, trailer_code, registration_number,
                          volume_capacity, weight_capacity, haulier_company, active)
    VALUES (?, ?, ?, ?, ?, ?, ?)
"""

# trailer_code is immutable - not part of the update
UPDATE_TRAILER = """
    UPDATE trailers
    SET trailer_name = ?, registration_number = ?, volume_capacity = ?,
        weight_capacity = ?, haulier_company = ?, active = ?
    WHERE id = ?
"""

SELECT_TRAILER_BY_ID = """
    SELECT id, trailer_name, trailer_code, registration_number,
           volume_capacity, weight_capacity, haulier_company, active,
           created_at, updated_at
    FROM trailers
    WHERE id = ?
"""

SELECT_TRAILER_BY_CODE = """
    SELECT id, trailer_name, trailer_code, registration_number,
           volume_capacity, weight_capacity, haulier_company, active,
           created_at, updated_at
    FROM trailers
    WHERE trailer_code = ?
"""

SELECT_ALL_TRAILERS = """
    SELECT id, trailer_name, trailer_code, registration_number,
           volume_capacity, weight_capacity, haulier_company, active,
           created_at, updated_at
    FROM trailers
    {where}
    ORDER BY {order_by}
"""

UPDATE_TRAILER_ACTIVE = """
    UPDATE trailers SET active = ? WHERE id = ?
"""

DELETE_TRAILER = """
    DELETE FROM trailers WHERE id = ?
"""

# ==================== Compartment Queries ====================

SELECT_COMPARTMENTS_FOR_TRAILER = """
    SELECT id, trailer_id, compartment_no, capacity, min_volume, max_volume,
           partial_load_allowed, must_use
    FROM compartments
    WHERE trailer_id = ?
    ORDER BY compartment_no
"""

SELECT_PRODUCTS_FOR_TRAILER = """
    SELECT cp.compartment_id, cp.product_name
    FROM compartment_products cp
    JOIN compartments c ON c.id = cp.compartment_id
    WHERE c.trailer_id = ?
    ORDER BY cp.product_name
"""

DELETE_COMPARTMENTS_FOR_TRAILER = """
    DELETE FROM compartments WHERE trailer_id = ?
"""

INSERT_COMPARTMENT = """
    INSERT INTO compartments (id, trailer_id, compartment_no, capacity,
                              min_volume, max_volume, partial_load_allowed, must_use)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
"""

INSERT_COMPARTMENT_PRODUCT = """
    INSERT INTO compartment_products (compartment_id, product_name)
    VALUES (?, ?)
"""
