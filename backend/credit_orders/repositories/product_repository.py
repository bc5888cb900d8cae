"""
Product Repository - Data Access Layer for Products

Product catalog lookups. find_by_ids resolves every product an order
references in one query.

Author: TM3
Date: 2025-10-17
"""
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from credit_orders.core.database import get_db_connection_dict
from credit_orders.domain.product import Product


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    def find_by_id(self, product_id: int) -> Optional[Product]:
        """
        Find product by ID

        Args:
            product_id: Internal product ID

        Returns:
            Product or None if not found
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, name, unit_price
                FROM products
                WHERE id = %s
            """, (product_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return Product(**row)

        finally:
            cursor.close()
            conn.close()

    def find_by_ids(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """
        Batch lookup of products by ID (single query, no N+1)

        Args:
            product_ids: Product IDs to resolve

        Returns:
            Dict mapping product ID to Product. IDs that do not exist are
            simply absent; callers decide whether that is an error.
        """
        ids = list(dict.fromkeys(product_ids))
        if not ids:
            return {}

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, name, unit_price
                FROM products
                WHERE id = ANY(%s)
            """, (ids,))

            return {row['id']: Product(**row) for row in cursor.fetchall()}

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        search: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Product], int]:
        """
        Find products with filters

        Args:
            search: Case-insensitive substring of the product name
            min_price: Minimum unit price (inclusive)
            max_price: Maximum unit price (inclusive)
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of products, total count)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = []
            params = []

            if search:
                conditions.append("name ILIKE %s")
                params.append(f"%{search}%")

            if min_price is not None:
                conditions.append("unit_price >= %s")
                params.append(min_price)

            if max_price is not None:
                conditions.append("unit_price <= %s")
                params.append(max_price)

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM products
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT id, name, unit_price
                FROM products
                WHERE {where_clause}
                ORDER BY name
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            products = [Product(**row) for row in cursor.fetchall()]
            return products, total

        finally:
            cursor.close()
            conn.close()
