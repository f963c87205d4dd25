#!/usr/bin/env python3
"""
Print sales totals and order counts per status.

Usage examples:
  - Totals over all orders:
      python scripts/sales_report.py

  - Totals for a date range (inclusive calendar days, local time):
      python scripts/sales_report.py --from 2024-01-01 --to 2024-01-31
"""

import asyncio
import os
import sys
import argparse

# Ensure project root is on sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ordersdb.database import Database
from ordersdb.helpers import configure_logging
from ordersdb.models import OrderStatus
from ordersdb.repository import OrderRepository


async def sales_report(date_from, date_to) -> None:
    db = Database()
    await db.connect()
    repository = OrderRepository(db)
    try:
        if date_from or date_to:
            date_from = date_from or date_to
            date_to = date_to or date_from
            sales = await repository.total_sales_by_date(date_from, date_to)
            print(f"💰 Sales {date_from} .. {date_to}: {sales['total']:.2f}")
            for status in OrderStatus:
                orders = await repository.get_by_status_and_date(status.value, date_from, date_to)
                print(f"  {status.value:<10} {len(orders)}")
        else:
            sales = await repository.total_sales()
            print(f"💰 Total sales: {sales['total']:.2f}")
            for status in OrderStatus:
                orders = await repository.get_by_status(status)
                print(f"  {status.value:<10} {len(orders)}")
    finally:
        await db.disconnect()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Report order sales")
    parser.add_argument("--from", dest="date_from", help="First day, YYYY-MM-DD")
    parser.add_argument("--to", dest="date_to", help="Last day, YYYY-MM-DD")
    return parser.parse_args()


if __name__ == "__main__":
    configure_logging()
    args = parse_args()
    asyncio.run(sales_report(date_from=args.date_from, date_to=args.date_to))
