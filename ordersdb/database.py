import logging
import motor.motor_asyncio
from typing import Optional
from .config import MONGODB_URI, MONGODB_DB, ORDERS_COLLECTION, MENU_ITEMS_COLLECTION

logger = logging.getLogger(__name__)


class Database:
    def __init__(
        self,
        uri: Optional[str] = None,
        name: Optional[str] = None,
        client: Optional[motor.motor_asyncio.AsyncIOMotorClient] = None,
    ):
        self.uri = uri or MONGODB_URI
        self.name = name or MONGODB_DB
        self.client: Optional[motor.motor_asyncio.AsyncIOMotorClient] = client
        self.db: Optional[motor.motor_asyncio.AsyncIOMotorDatabase] = None
        if client is not None:
            # Injected clients (tests, shared app client) are used as-is, no ping
            self.db = client[self.name]

    async def connect(self):
        """Connect to MongoDB"""
        try:
            if not self.uri:
                raise ValueError("MONGODB_URI environment variable not set")

            self.client = motor.motor_asyncio.AsyncIOMotorClient(self.uri)
            self.db = self.client[self.name]

            # Test connection
            await self.client.admin.command('ping')
            logger.info("Connected to MongoDB database %r", self.name)

        except Exception as e:
            logger.error("Failed to connect to MongoDB: %s", e)
            raise

    async def disconnect(self):
        """Disconnect from MongoDB"""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    # Collections
    @property
    def orders(self):
        return self.db[ORDERS_COLLECTION]

    @property
    def menu_items(self):
        return self.db[MENU_ITEMS_COLLECTION]
