from __future__ import annotations

import datetime
import logging
from typing import Optional, Union

from app.utils.dates import is_less_than_days_ago
from config.settings import get_settings
from models import (
    DATABASE_ERRORS,
    count_classes_with_id,
    get_class_by_id,
    insert_class,
    list_classes_for_tutor,
    update_class_status,
)

logger = logging.getLogger(__name__)


def class_exists(class_id: int) -> bool:
    """Return True when exactly one class carries the identifier."""
    return count_classes_with_id(class_id) == 1


def fetch_class(class_id: int) -> Optional[dict[str, object]]:
    """Return the class row if it exists."""
    return get_class_by_id(class_id)


def _shape_class(row: dict[str, object]) -> dict[str, object]:
    return {
        "name": f"{row['level']} {row['subject']}",
        "student": f"{row['first_name']}, {row['last_name']}",
        "date": row["date"],
        "id": row["id"],
    }


def list_tutor_classes(
    tutor_discord_id: str,
    *,
    today: Optional[datetime.date] = None,
) -> list[dict[str, object]]:
    """Return the tutor's open classes that are recent or upcoming, reshaped for the bot."""
    lookback_days = get_settings().CLASS_LOOKBACK_DAYS
    rows = list_classes_for_tutor(tutor_discord_id)
    return [
        _shape_class(row)
        for row in rows
        if is_less_than_days_ago(row["date"], lookback_days, today=today)
    ]


def create_a_class(
    course_id: int,
    week_number: int,
    date: Union[str, datetime.date],
    day: str,
) -> bool:
    """Create a new empty, unpaid class. Returns True if the insert succeeded."""
    try:
        class_id = insert_class(
            course_id=course_id,
            week_number=week_number,
            date=date,
            day=day,
        )
    except DATABASE_ERRORS as exc:
        logger.error(f"Failed to create class for course {course_id}: {exc}", exc_info=True)
        return False
    logger.info(f"Created class {class_id} for course {course_id} (week {week_number})")
    return True


def set_status(class_id: int, status: str) -> bool:
    """Change the status of a class."""
    return update_class_status(class_id, status)
