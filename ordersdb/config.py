import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# MongoDB configuration
# The connection string must be provided via .env; no hardcoded default
MONGODB_URI = os.getenv("MONGODB_URI")
MONGODB_DB = os.getenv("MONGODB_DB", "food_ordering")

# Collection names. Menu items are owned by the catalog service, we only read them.
ORDERS_COLLECTION = os.getenv("ORDERS_COLLECTION", "orders")
MENU_ITEMS_COLLECTION = os.getenv("MENU_ITEMS_COLLECTION", "menuitems")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
