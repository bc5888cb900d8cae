#!/usr/bin/env python3
"""
Diagnostic script: inspect a customer's credit
Shows the balance and which recent orders fall inside the credit window

Usage:
    python scripts/debug/inspect_credit.py <customer_id> [--limit N]
"""
import argparse
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).parent.parent.parent
sys.path.insert(0, str(BACKEND_DIR))

from dotenv import load_dotenv

load_dotenv(BACKEND_DIR / '.env')

from credit_orders.domain.credit import window_start
from credit_orders.domain.errors import CustomerNotFound
from credit_orders.domain.order import OrderStatus
from credit_orders.repositories.order_repository import OrderRepository
from credit_orders.services.credit_service import CreditService


def inspect_credit(customer_id: int, limit: int):
    print("\n" + "="*70)
    print(f"CREDIT INSPECTION: customer {customer_id}")
    print("="*70)

    service = CreditService()
    try:
        balance = service.get_balance(customer_id)
    except CustomerNotFound as e:
        print(f"\n{e.message}")
        return 1

    since = window_start(balance.reference, balance.window_days)

    print(f"\nCustomer:          {balance.customer_name}")
    print(f"Credit limit:      {balance.credit_limit:>12}")
    print(f"Consumed credit:   {balance.consumed_credit:>12}  (since {since.isoformat()})")
    print(f"Available balance: {balance.available_balance:>12}")

    orders, total = OrderRepository().find_all(customer_id=customer_id, limit=limit)

    print(f"\nLast {len(orders)} of {total} orders:")
    for order in orders:
        counts = order.status == OrderStatus.APPROVED and order.created_at >= since
        marker = "*" if counts else " "
        print(
            f"  {marker} #{order.id:<6} {order.created_at:%Y-%m-%d %H:%M} "
            f"{order.status.value:<9} {order.total_value:>12}  ({order.item_count} items)"
        )

    print("\n  * counts towards consumed credit")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Inspect a customer's credit")
    parser.add_argument("customer_id", type=int)
    parser.add_argument("--limit", type=int, default=20, help="Orders to list")
    args = parser.parse_args()

    sys.exit(inspect_credit(args.customer_id, args.limit))


if __name__ == "__main__":
    main()
