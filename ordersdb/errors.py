"""Exceptions raised by the orders data layer.

Everything derives from ``StoreError`` so the HTTP layer can catch one type
and map subclasses to status codes.
"""


class StoreError(Exception):
    """Driver or query failure. The driver exception is kept as ``__cause__``."""


class InvalidIdError(StoreError):
    """The identifier is not a valid ObjectId."""

    def __init__(self, value):
        super().__init__(f"Invalid order id: {value!r}")
        self.value = value


class ValidationError(StoreError):
    """Fields do not satisfy the order schema."""

    def __init__(self, errors):
        self.errors = errors
        super().__init__(f"Order validation failed: {errors}")


class NotFoundError(StoreError):
    """No order matched the given id."""

    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class DanglingReferenceError(StoreError):
    """An order line points at a menu item that no longer exists."""

    def __init__(self, order_id: str, line_index: int):
        super().__init__(f"Order {order_id} line {line_index} has no resolved menu item")
        self.order_id = order_id
        self.line_index = line_index


class MissingPriceError(StoreError):
    """A resolved menu item has no price, so the line cannot be totalled."""

    def __init__(self, order_id: str, line_index: int, item_id):
        super().__init__(f"Order {order_id} line {line_index}: menu item {item_id} has no price")
        self.order_id = order_id
        self.line_index = line_index
        self.item_id = item_id
