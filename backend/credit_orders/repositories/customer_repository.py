"""
Customer Repository - Data Access Layer for Customers

Customer registry lookups used by the order workflow and the customer
endpoints. Read-only: credit limits are maintained outside this service.

Author: TM3
Date: 2025-10-17
"""
from typing import List, Optional, Tuple

from credit_orders.core.database import get_db_connection_dict
from credit_orders.domain.customer import Customer


class CustomerRepository:
    """
    Repository for Customer data access

    All SQL queries for customers are centralized here.
    Returns Customer domain models, not raw dictionaries.
    """

    def find_by_id(self, customer_id: int) -> Optional[Customer]:
        """
        Find customer by ID

        Args:
            customer_id: Internal customer ID

        Returns:
            Customer or None if not found
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, name, credit_limit
                FROM customers
                WHERE id = %s
            """, (customer_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return Customer(**row)

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Customer], int]:
        """
        Find customers, optionally filtered by a name search

        Args:
            search: Case-insensitive substring of the customer name
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of customers, total count)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = []
            params = []

            if search:
                conditions.append("name ILIKE %s")
                params.append(f"%{search}%")

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM customers
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT id, name, credit_limit
                FROM customers
                WHERE {where_clause}
                ORDER BY name
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            customers = [Customer(**row) for row in cursor.fetchall()]
            return customers, total

        finally:
            cursor.close()
            conn.close()
