#!/usr/bin/env python3
"""
Seed MongoDB with sample menu items and orders.
Run this after setting MONGODB_URI in .env

Usage:
    python scripts/seed_orders.py
    python scripts/seed_orders.py --drop
"""

import asyncio
import sys
import os
import argparse
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ordersdb.database import Database
from ordersdb.helpers import configure_logging
from ordersdb.models import OrderStatus
from ordersdb.repository import OrderRepository

SAMPLE_MENU = [
    {"name": "Margherita Pizza", "price": 9.5},
    {"name": "Chicken Burger", "price": 7.0},
    {"name": "Caesar Salad", "price": 6.25},
    {"name": "Lemonade", "price": 2.5},
]


async def seed(drop: bool):
    """Insert sample data"""
    print("🔄 Seeding orders database...")

    db = Database()
    await db.connect()
    repository = OrderRepository(db)

    try:
        if drop:
            await db.orders.delete_many({})
            await db.menu_items.delete_many({})
            print("🧹 Cleared orders and menu items")

        print("📦 Creating menu items...")
        result = await db.menu_items.insert_many([dict(item) for item in SAMPLE_MENU])
        pizza, burger, salad, lemonade = [str(_id) for _id in result.inserted_ids]

        print("🧾 Creating orders...")
        samples = [
            {
                "name": "Alice Martin",
                "address": "12 Baker Street",
                "phone": "+44 20 7946 0018",
                "items": [{"item": pizza, "quantity": 2}, {"item": lemonade, "quantity": 2}],
            },
            {
                "name": "Bob Chen",
                "address": "8 Harbour Road",
                "phone": "+44 20 7946 0321",
                "items": [{"item": burger, "quantity": 1}, {"item": salad, "quantity": 1}],
                "status": OrderStatus.CONFIRMED,
            },
            {
                "name": "Carla Diaz",
                "address": "41 Mill Lane",
                "phone": "+44 20 7946 0977",
                "items": [{"item": salad, "quantity": 3}],
                "status": OrderStatus.DELIVERED,
            },
        ]
        for fields in samples:
            order = await repository.create(fields)
            print(f"✅ Order {order.id} for {order.name} ({order.status.value})")

        print("🎉 Seeding completed")
    finally:
        await db.disconnect()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed sample menu items and orders")
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Remove existing orders and menu items first",
    )
    return parser.parse_args()


if __name__ == "__main__":
    configure_logging()
    args = parse_args()
    asyncio.run(seed(drop=args.drop))
