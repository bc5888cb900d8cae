"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and returns Order domain models.
Also hosts the credit ledger query (approved order total inside the
rolling window), since it is an aggregation over the orders table.

Methods that take a `conn` argument run inside the caller's transaction
and never commit or close it.

Author: TM3
Date: 2025-10-17
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from psycopg2.extras import RealDictCursor

from credit_orders.core.database import get_db_connection_dict
from credit_orders.domain.order import Order, OrderItem, OrderLine, OrderStatus

ORDER_COLUMNS = """
    o.id, o.customer_id, o.created_at, o.status, o.total_value,
    c.name as customer_name
"""

ITEM_COLUMNS = """
    oi.id, oi.order_id, oi.product_id, oi.quantity, oi.unit_price, oi.subtotal,
    p.name as product_name
"""


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    Returns Order domain models with their items loaded eagerly.
    """

    # ------------------------------------------------------------------
    # Credit ledger
    # ------------------------------------------------------------------

    def sum_approved_since(self, customer_id: int, since: datetime, conn=None) -> Decimal:
        """
        Sum total_value of a customer's APPROVED orders placed at or after `since`

        REJECTED orders never count, whatever their age. The lower bound is
        inclusive: an order placed exactly at `since` counts.

        Args:
            customer_id: Customer ID
            since: Window lower bound (inclusive)
            conn: Optional connection of an open transaction

        Returns:
            Sum as Decimal, Decimal('0') when no order qualifies
        """
        should_close = conn is None
        if conn is None:
            conn = get_db_connection_dict()
        cursor = conn.cursor(cursor_factory=RealDictCursor)

        try:
            cursor.execute("""
                SELECT COALESCE(SUM(total_value), 0) as consumed
                FROM orders
                WHERE customer_id = %s
                  AND status = %s
                  AND created_at >= %s
            """, (customer_id, OrderStatus.APPROVED.value, since))

            return Decimal(cursor.fetchone()['consumed'])

        finally:
            cursor.close()
            if should_close:
                conn.close()

    def lock_customer_credit(self, conn, customer_id: int) -> None:
        """
        Take a transaction-scoped advisory lock on a customer's credit

        Concurrent transactions locking the same customer wait until the
        holder commits or rolls back.
        """
        cursor = conn.cursor()
        try:
            cursor.execute("SELECT pg_advisory_xact_lock(%s)", (customer_id,))
        finally:
            cursor.close()

    def total_by_customer_and_period(
        self,
        customer_id: int,
        start: datetime,
        end: datetime
    ) -> Decimal:
        """
        Sum of a customer's APPROVED orders placed between start and end (inclusive)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT COALESCE(SUM(total_value), 0) as total
                FROM orders
                WHERE customer_id = %s
                  AND status = %s
                  AND created_at BETWEEN %s AND %s
            """, (customer_id, OrderStatus.APPROVED.value, start, end))

            return Decimal(cursor.fetchone()['total'])

        finally:
            cursor.close()
            conn.close()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(
        self,
        conn,
        customer_id: int,
        created_at: datetime,
        status: OrderStatus,
        total_value: Decimal,
        lines: List[OrderLine]
    ) -> Order:
        """
        Insert an order and all of its items

        Runs on the caller's connection; the caller commits, so the order
        and its items become visible together or not at all.

        Returns:
            The persisted Order with item IDs filled in
        """
        cursor = conn.cursor(cursor_factory=RealDictCursor)

        try:
            cursor.execute("""
                INSERT INTO orders (customer_id, created_at, status, total_value)
                VALUES (%s, %s, %s, %s)
                RETURNING id, created_at
            """, (customer_id, created_at, status.value, total_value))

            order_row = cursor.fetchone()
            order_id = order_row['id']

            items = []
            for line in lines:
                cursor.execute("""
                    INSERT INTO order_items (order_id, product_id, quantity, unit_price, subtotal)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING id
                """, (order_id, line.product_id, line.quantity, line.unit_price, line.subtotal))

                item_row = cursor.fetchone()
                items.append(OrderItem(
                    id=item_row['id'],
                    order_id=order_id,
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    subtotal=line.subtotal,
                ))

            return Order(
                id=order_id,
                customer_id=customer_id,
                created_at=order_row['created_at'],
                status=status,
                total_value=total_value,
                items=items,
            )

        finally:
            cursor.close()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_by_id(self, order_id: int) -> Optional[Order]:
        """
        Find order by ID with customer name and items

        Args:
            order_id: Internal order ID

        Returns:
            Order with items or None if not found
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders o
                LEFT JOIN customers c ON o.customer_id = c.id
                WHERE o.id = %s
            """, (order_id,))

            row = cursor.fetchone()
            if not row:
                return None

            cursor.execute(f"""
                SELECT {ITEM_COLUMNS}
                FROM order_items oi
                LEFT JOIN products p ON oi.product_id = p.id
                WHERE oi.order_id = %s
                ORDER BY oi.id
            """, (order_id,))

            order_dict = dict(row)
            order_dict['items'] = [OrderItem(**item) for item in cursor.fetchall()]

            return Order(**order_dict)

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        customer_id: Optional[int] = None,
        status: Optional[OrderStatus] = None,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Order], int]:
        """
        Find orders with filters, newest first

        Args:
            customer_id: Filter by customer
            status: Filter by credit decision
            from_date: Orders placed at or after this instant
            to_date: Orders placed at or before this instant
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of orders, total count)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = []
            params = []

            if customer_id is not None:
                conditions.append("o.customer_id = %s")
                params.append(customer_id)

            if status is not None:
                conditions.append("o.status = %s")
                params.append(status.value)

            if from_date is not None:
                conditions.append("o.created_at >= %s")
                params.append(from_date)

            if to_date is not None:
                conditions.append("o.created_at <= %s")
                params.append(to_date)

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM orders o
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders o
                LEFT JOIN customers c ON o.customer_id = c.id
                WHERE {where_clause}
                ORDER BY o.created_at DESC, o.id DESC
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            order_rows = cursor.fetchall()
            if not order_rows:
                return [], total

            # All items for this page in one query
            order_ids = [row['id'] for row in order_rows]
            cursor.execute(f"""
                SELECT {ITEM_COLUMNS}
                FROM order_items oi
                LEFT JOIN products p ON oi.product_id = p.id
                WHERE oi.order_id = ANY(%s)
                ORDER BY oi.order_id, oi.id
            """, (order_ids,))

            items_by_order: Dict[int, List[OrderItem]] = {}
            for item in cursor.fetchall():
                items_by_order.setdefault(item['order_id'], []).append(OrderItem(**item))

            orders = []
            for row in order_rows:
                order_dict = dict(row)
                order_dict['items'] = items_by_order.get(row['id'], [])
                orders.append(Order(**order_dict))

            return orders, total

        finally:
            cursor.close()
            conn.close()

    def count_by_status(self, status: OrderStatus) -> int:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT COUNT(*) as total
                FROM orders
                WHERE status = %s
            """, (status.value,))

            return cursor.fetchone()['total']

        finally:
            cursor.close()
            conn.close()
