"""Stock value transformers.

Each takes zero or one argument: called with no argument it produces the
field default, called with a raw payload value it produces the typed value.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, time
from decimal import Decimal

DEFAULT_ID = "-1"


def primed_decimal(value: int | float | str | Decimal = 0) -> Decimal:
    """Exact decimal; floats go through ``str`` to keep their short form."""
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def primed_id(value: str | None = None) -> str:
    return value if value else DEFAULT_ID


def primed_uuid(value: str | uuid.UUID | None = None) -> str:
    """Keep a given identifier, otherwise generate a random UUID4 string."""
    if isinstance(value, uuid.UUID):
        return str(value)
    return value if value else str(uuid.uuid4())


def primed_date(value: str | date | None = None) -> date:
    """Calendar date. Defaults to today; accepts ISO strings and date/datetime."""
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return date(value.year, value.month, value.day)
    if "T" in value:
        return datetime.fromisoformat(value).date()
    return date.fromisoformat(value)


def primed_datetime(value: str | date | None = None) -> datetime:
    """Timezone-aware local datetime by default.

    ISO strings are parsed as-is; datetime values are copied and plain
    dates become midnight of that day.
    """
    if isinstance(value, datetime):
        return value.replace()
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return datetime.now().astimezone()
