"""Helper utilities for the orders data layer."""
import logging
from datetime import date, datetime, time, timezone
from typing import Dict, Union

from bson import ObjectId

from .config import LOG_LEVEL
from .errors import InvalidIdError, ValidationError

DateLike = Union[date, datetime, str]

# Upper bound of a date range: 23:59:59.000 local, compared with $lt
DAY_END = time(23, 59, 59)


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Basic stderr logging for scripts. Libraries only get loggers."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def to_object_id(value) -> ObjectId:
    """Parse an order id, raising InvalidIdError for malformed values."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise InvalidIdError(value)


def to_calendar_date(value: DateLike) -> date:
    """Reduce a date, datetime or ISO string to its calendar date.

    Args:
        value: ``date``, ``datetime`` or a string starting with ``YYYY-MM-DD``

    Returns:
        the calendar date; any time of day is dropped

    Raises:
        ValidationError: the value is not a date or not an ISO date string
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError as e:
            raise ValidationError(f"Invalid date {value!r}: {e}") from e
    raise ValidationError(f"Expected a date, datetime or ISO string, got {type(value).__name__}")


def local_to_utc(local_dt: datetime) -> datetime:
    """Convert a naive local-time datetime to naive UTC, as stored in MongoDB."""
    return local_dt.astimezone(timezone.utc).replace(tzinfo=None)


def day_start(value: DateLike) -> datetime:
    """Local midnight of the given day, in stored (naive UTC) form."""
    return local_to_utc(datetime.combine(to_calendar_date(value), time.min))


def day_end(value: DateLike) -> datetime:
    """Local 23:59:59.000 of the given day, in stored (naive UTC) form."""
    return local_to_utc(datetime.combine(to_calendar_date(value), DAY_END))


def created_between(date_from: DateLike, date_to: DateLike) -> Dict[str, dict]:
    """Filter on createdAt: inclusive local start of ``date_from``, exclusive 23:59:59 of ``date_to``."""
    return {"createdAt": {"$gte": day_start(date_from), "$lt": day_end(date_to)}}
