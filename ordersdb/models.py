from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, List, Optional, Sequence, Union
from datetime import datetime, timezone
from enum import Enum
from bson import ObjectId

from .errors import DanglingReferenceError, MissingPriceError


def utcnow() -> datetime:
    """Naive UTC timestamp, the form the driver hands back from MongoDB."""
    return _to_stored(datetime.now(timezone.utc))


def _stringify_object_id(value):
    if isinstance(value, ObjectId):
        return str(value)
    return value


def _plain_bson(value):
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {key: _plain_bson(inner) for key, inner in value.items()}
    if isinstance(value, list):
        return [_plain_bson(inner) for inner in value]
    return value


def _to_stored(value: datetime) -> datetime:
    # BSON dates are naive UTC and only keep milliseconds
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class MenuItem(BaseModel):
    """Catalog entry referenced by order lines. Owned elsewhere, read only here."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = Field(default=None, alias="_id")
    name: Optional[str] = None
    price: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def plain_values(cls, data):
        # Catalog documents may carry ObjectId references of their own
        return _plain_bson(data)


class OrderLine(BaseModel):
    # ObjectId hex string until resolved, MenuItem after, None when the reference dangles
    item: Union[MenuItem, str, None] = None
    quantity: int

    @field_validator("item", mode="before")
    @classmethod
    def normalize_item(cls, value):
        if isinstance(value, str) and not ObjectId.is_valid(value):
            raise ValueError(f"invalid menu item reference: {value!r}")
        return _stringify_object_id(value)

    @property
    def item_id(self) -> Optional[str]:
        if isinstance(self.item, MenuItem):
            return self.item.id
        return self.item

    def to_document(self) -> Dict[str, Any]:
        ref = self.item_id
        return {
            "item": ObjectId(ref) if ref is not None else None,
            "quantity": self.quantity,
        }


class Order(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id")
    name: str
    address: str
    phone: str
    items: List[OrderLine] = Field(default_factory=list)
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="updatedAt")

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, value):
        return _stringify_object_id(value)

    @field_validator("created_at", "updated_at")
    @classmethod
    def truncate_timestamps(cls, value: datetime) -> datetime:
        return _to_stored(value)

    def to_document(self) -> Dict[str, Any]:
        """Mongo document for insertion. ``_id`` is left for the driver to generate."""
        doc = self.model_dump(by_alias=True, exclude={"id", "items", "status"})
        doc["status"] = self.status.value
        doc["items"] = [line.to_document() for line in self.items]
        return doc

    def to_json(self) -> Dict[str, Any]:
        """JSON-ready dict with the virtual ``id`` next to ``_id``."""
        data = self.model_dump(mode="json", by_alias=True)
        data["id"] = self.id
        return data

    @property
    def total(self):
        return calc_total(self.items, self.id)


class OrderUpdate(BaseModel):
    """Partial order fields accepted by an update. Unknown keys are dropped."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    items: Optional[List[OrderLine]] = None
    status: Optional[OrderStatus] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @field_validator("name", "address", "phone", "items", "status", "created_at", mode="before")
    @classmethod
    def reject_null(cls, value):
        # Only runs for keys the caller actually sent
        if value is None:
            raise ValueError("field is required and cannot be null")
        return value

    @field_validator("created_at")
    @classmethod
    def truncate_created(cls, value: datetime) -> datetime:
        return _to_stored(value)

    def to_document(self) -> Dict[str, Any]:
        """``$set`` payload holding only the fields that were supplied."""
        doc = self.model_dump(by_alias=True, exclude_unset=True, exclude={"items", "status"})
        if self.status is not None:
            doc["status"] = self.status.value
        if self.items is not None:
            doc["items"] = [line.to_document() for line in self.items]
        return doc


def calc_total(lines: Sequence[OrderLine], order_id: Optional[str] = None):
    """Sum of price * quantity over resolved order lines.

    Raises DanglingReferenceError for a line whose menu item was not resolved,
    MissingPriceError for a menu item without a price.
    """
    total = 0
    for index, line in enumerate(lines):
        if not isinstance(line.item, MenuItem):
            raise DanglingReferenceError(order_id, index)
        if line.item.price is None:
            raise MissingPriceError(order_id, index, line.item.id)
        total += line.item.price * line.quantity
    return total
