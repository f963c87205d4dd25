import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from .database import Database
from .errors import NotFoundError, StoreError, ValidationError
from .helpers import DateLike, created_between, to_object_id
from .models import Order, OrderStatus, OrderUpdate, calc_total, utcnow

logger = logging.getLogger(__name__)


@contextmanager
def _driver_errors(operation: str):
    """Re-raise driver failures as StoreError, keeping the original as the cause."""
    try:
        yield
    except PyMongoError as e:
        logger.error("%s failed: %s", operation, e)
        raise StoreError(f"{operation} failed: {e}") from e


def _status_value(status: Union[OrderStatus, str]) -> str:
    return status.value if isinstance(status, OrderStatus) else status


def _status_pattern(status: Union[OrderStatus, str]) -> Dict[str, str]:
    # Case-insensitive regex, the status string is not escaped
    return {"$regex": _status_value(status), "$options": "i"}


def _to_order(doc: dict) -> Order:
    try:
        return Order.model_validate(doc)
    except PydanticValidationError as e:
        raise ValidationError(e.errors()) from e


class OrderRepository:
    """Access path to order documents.

    Build one per process from a connected Database and hand it to the request
    handlers. Reads that return item data resolve ``items[].item`` against the
    menu items collection. ``get_by_status`` is the exception: it returns raw
    item references, matching the behavior existing callers rely on.
    """

    def __init__(self, database: Database):
        self.database = database

    @property
    def orders(self):
        return self.database.orders

    async def _find(self, query: Dict[str, Any], operation: str) -> List[dict]:
        docs = []
        with _driver_errors(operation):
            async for doc in self.orders.find(query):
                docs.append(doc)
        logger.debug("%s matched %d orders", operation, len(docs))
        return docs

    async def _populate(self, docs: List[dict]) -> List[dict]:
        """Replace item references with menu item documents, in place.

        References that no longer resolve become None.
        """
        refs = {
            line.get("item")
            for doc in docs
            for line in doc.get("items") or []
            if line.get("item") is not None
        }
        if not refs:
            return docs

        menu: Dict[Any, dict] = {}
        with _driver_errors("populate items.item"):
            async for item in self.database.menu_items.find({"_id": {"$in": list(refs)}}):
                menu[item["_id"]] = item

        for doc in docs:
            for line in doc.get("items") or []:
                ref = line.get("item")
                if ref is None:
                    continue
                line["item"] = menu.get(ref)
                if line["item"] is None:
                    logger.warning("Order %s references missing menu item %s", doc.get("_id"), ref)
        return docs

    async def _find_resolved(self, query: Dict[str, Any], operation: str) -> List[Order]:
        docs = await self._populate(await self._find(query, operation))
        return [_to_order(doc) for doc in docs]

    @staticmethod
    def _sales(orders: List[Order]) -> Dict[str, float]:
        return {"total": sum(calc_total(order.items, order.id) for order in orders)}

    async def get_all(self) -> List[Order]:
        """All orders with menu items resolved."""
        return await self._find_resolved({}, "get_all")

    async def get_one(self, order_id: str) -> Optional[Order]:
        """Order by id with menu items resolved, or None."""
        oid = to_object_id(order_id)
        with _driver_errors("get_one"):
            doc = await self.orders.find_one({"_id": oid})
        if doc is None:
            logger.debug("Order %s not found", order_id)
            return None
        await self._populate([doc])
        return _to_order(doc)

    async def create(self, fields: Union[Order, Mapping[str, Any]]) -> Order:
        """Insert a new order. Status and timestamps default when not given.

        Any supplied id is ignored, the driver generates one.
        """
        try:
            order = fields if isinstance(fields, Order) else Order.model_validate(dict(fields))
        except PydanticValidationError as e:
            raise ValidationError(e.errors()) from e

        with _driver_errors("create"):
            result = await self.orders.insert_one(order.to_document())
        created = order.model_copy(update={"id": str(result.inserted_id)})
        logger.info("Created order %s", created.id)
        return created

    async def update(self, order_id: str, fields: Mapping[str, Any]) -> Optional[Order]:
        """Set the supplied fields and refresh updatedAt.

        Returns the updated order with raw item references, or None when no
        order has this id.
        """
        oid = to_object_id(order_id)
        try:
            changes = OrderUpdate.model_validate(dict(fields))
        except PydanticValidationError as e:
            raise ValidationError(e.errors()) from e

        update = changes.to_document()
        update["updatedAt"] = utcnow()
        with _driver_errors("update"):
            doc = await self.orders.find_one_and_update(
                {"_id": oid},
                {"$set": update},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            logger.warning("Update skipped, order %s not found", order_id)
            return None
        logger.info("Updated order %s (%s)", order_id, ", ".join(sorted(update)))
        return _to_order(doc)

    async def remove(self, order_id: str) -> str:
        """Delete an order and return its id. Raises NotFoundError if absent."""
        oid = to_object_id(order_id)
        with _driver_errors("remove"):
            doc = await self.orders.find_one_and_delete({"_id": oid})
        if doc is None:
            logger.warning("Remove failed, order %s not found", order_id)
            raise NotFoundError(order_id)
        logger.info("Removed order %s", order_id)
        return str(doc["_id"])

    async def get_by_status(self, status: Union[OrderStatus, str]) -> List[Order]:
        """Orders whose status equals ``status`` exactly.

        Item references are not resolved here, unlike the other reads.
        """
        docs = await self._find({"status": _status_value(status)}, "get_by_status")
        return [_to_order(doc) for doc in docs]

    async def get_by_status_query(self, status: Union[OrderStatus, str]) -> List[Order]:
        """Orders whose status contains ``status``, case-insensitively."""
        return await self._find_resolved({"status": _status_pattern(status)}, "get_by_status_query")

    async def get_by_status_and_date(
        self, status: Union[OrderStatus, str], date_from: DateLike, date_to: DateLike
    ) -> List[Order]:
        """Status pattern match restricted to orders created in the date range."""
        query = {"status": _status_pattern(status)}
        query.update(created_between(date_from, date_to))
        return await self._find_resolved(query, "get_by_status_and_date")

    async def total_sales(self) -> Dict[str, float]:
        """Sum of price * quantity over every line of every order.

        Raises DanglingReferenceError when a line's menu item is gone and
        MissingPriceError when it has no price.
        """
        return self._sales(await self.get_all())

    async def total_sales_by_date(self, date_from: DateLike, date_to: DateLike) -> Dict[str, float]:
        """Same as total_sales, for orders created in the date range."""
        orders = await self._find_resolved(created_between(date_from, date_to), "total_sales_by_date")
        return self._sales(orders)
