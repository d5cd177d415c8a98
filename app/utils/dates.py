from __future__ import annotations

import datetime
import logging
from typing import Optional, Union

logger = logging.getLogger(__name__)

DateLike = Union[str, datetime.date, datetime.datetime, None]


def parse_class_date(value: DateLike) -> Optional[datetime.date]:
    """Return the calendar date for a stored class date, or None if unparsable."""
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value

    text = str(value).strip()
    if not text:
        return None
    try:
        if len(text) > 10:
            if text[10] not in ("T", " "):
                return None
            return datetime.datetime.fromisoformat(text).date()
        return datetime.date.fromisoformat(text)
    except ValueError:
        return None


def is_less_than_days_ago(
    value: DateLike,
    days: int = 10,
    *,
    today: Optional[datetime.date] = None,
) -> bool:
    """
    Return True when the date falls within the last ``days`` days or in the future.

    The boundary day itself (exactly ``days`` ago) is included.
    """
    parsed = parse_class_date(value)
    if parsed is None:
        logger.warning(f"Could not parse class date {value!r}; excluding it.")
        return False

    reference = today or datetime.date.today()
    return parsed >= reference - datetime.timedelta(days=days)
