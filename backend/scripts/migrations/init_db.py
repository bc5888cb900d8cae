#!/usr/bin/env python3
"""
Script: init_db.py
Purpose: Create the credit orders schema and optionally load sample data

Sample data: 5 customers, 5 products and 3 orders (2 APPROVED, 1 REJECTED,
8 items in total). Order dates are relative to today so the first customer
has approved orders inside the 30-day credit window.

Usage:
    cd backend && source venv/bin/activate
    python scripts/migrations/init_db.py [--seed] [--drop]

Options:
    --seed    Insert sample data (only into empty tables)
    --drop    Drop existing tables before creating them
"""
import argparse
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

# Add backend to path
BACKEND_DIR = Path(__file__).parent.parent.parent
sys.path.insert(0, str(BACKEND_DIR))

from dotenv import load_dotenv

load_dotenv(BACKEND_DIR / '.env')

from credit_orders.core.database import Base, SessionLocal, engine
from credit_orders.models import Customer, Order, OrderItem, Product

CUSTOMERS = [
    ("João Silva Santos", Decimal("10000.00")),
    ("Maria Oliveira Costa", Decimal("5000.00")),
    ("Carlos Eduardo Lima", Decimal("15000.00")),
    ("Ana Paula Ferreira", Decimal("3000.00")),
    ("Pedro Henrique Souza", Decimal("8000.00")),
]

PRODUCTS = [
    ("Notebook Dell Inspiron 15", Decimal("3500.00")),
    ("Mouse Logitech MX Master 3", Decimal("450.00")),
    ("Monitor Samsung 24\"", Decimal("1200.00")),
    ("Teclado Mecânico Redragon", Decimal("350.00")),
    ("Headset HyperX Cloud II", Decimal("600.00")),
]

# (customer index, days ago, status, [(product index, quantity), ...])
ORDERS = [
    (0, 10, "APPROVED", [(0, 1), (1, 2), (3, 1)]),
    (1, 5, "APPROVED", [(2, 2), (1, 1), (4, 1)]),
    (3, 2, "REJECTED", [(0, 1), (2, 1)]),
]


def print_header(title: str):
    """Print formatted header"""
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}\n")


def create_schema(drop: bool = False):
    if drop:
        print("Dropping existing tables...")
        Base.metadata.drop_all(engine)

    Base.metadata.create_all(engine)
    print(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")


def seed(session) -> bool:
    if session.query(Customer).count() > 0:
        print("Customers table is not empty, skipping sample data")
        return False

    customers = [Customer(name=name, credit_limit=limit) for name, limit in CUSTOMERS]
    products = [Product(name=name, unit_price=price) for name, price in PRODUCTS]
    session.add_all(customers + products)
    session.flush()

    now = datetime.now(timezone.utc)
    for customer_index, days_ago, status, lines in ORDERS:
        subtotals = [(products[p], qty, products[p].unit_price * qty) for p, qty in lines]
        order = Order(
            customer_id=customers[customer_index].id,
            created_at=now - timedelta(days=days_ago),
            status=status,
            total_value=sum((subtotal for _, _, subtotal in subtotals), Decimal("0")),
        )
        session.add(order)
        session.flush()

        for product, quantity, subtotal in subtotals:
            session.add(OrderItem(
                order_id=order.id,
                product_id=product.id,
                quantity=quantity,
                unit_price=product.unit_price,
                subtotal=subtotal,
            ))

    session.commit()
    print(f"Inserted {len(CUSTOMERS)} customers, {len(PRODUCTS)} products, {len(ORDERS)} orders")
    return True


def main():
    parser = argparse.ArgumentParser(description="Create the credit orders schema")
    parser.add_argument("--seed", action="store_true", help="Insert sample data")
    parser.add_argument("--drop", action="store_true", help="Drop tables first")
    args = parser.parse_args()

    print_header("Credit Orders - database initialization")
    create_schema(drop=args.drop)

    if args.seed:
        session = SessionLocal()
        try:
            seed(session)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    print("\nDone.")


if __name__ == "__main__":
    main()
