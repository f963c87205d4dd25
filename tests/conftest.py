import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from ordersdb.database import Database
from ordersdb.repository import OrderRepository


@pytest_asyncio.fixture
async def database():
    """In-memory MongoDB per test."""
    return Database(client=AsyncMongoMockClient(), name="orders_test")


@pytest_asyncio.fixture
async def repository(database):
    return OrderRepository(database)


@pytest_asyncio.fixture
async def menu(database):
    """Two menu items, priced 10 and 5. Returns their ids as strings."""
    result = await database.menu_items.insert_many(
        [{"name": "Pizza", "price": 10}, {"name": "Soda", "price": 5}]
    )
    return [str(_id) for _id in result.inserted_ids]
