from __future__ import annotations

import datetime

import pytest

from app.repositories import classes_repo
from models import (
    CLASS_STATUS_COMPLETED,
    CLASS_STATUS_RESCHEDULED,
    count_classes_with_id,
    get_class_by_id,
    insert_class,
)


def _days_from(today: datetime.date, offset: int) -> str:
    return (today + datetime.timedelta(days=offset)).isoformat()


def test_create_a_class_inserts_empty_unpaid_class(tutoring_context, today):
    created = classes_repo.create_a_class(
        tutoring_context["course_id"], 3, _days_from(today, 2), "Thursday"
    )

    assert created is True
    rows = classes_repo.list_tutor_classes(tutoring_context["tutor_discord_id"], today=today)
    assert len(rows) == 1

    stored = get_class_by_id(rows[0]["id"])
    assert stored["status"] == "Empty"
    assert stored["is_paid"] == 0
    assert stored["week"] == 3
    assert stored["day"] == "Thursday"
    assert stored["course_id"] == tutoring_context["course_id"]


def test_create_a_class_accepts_date_objects(tutoring_context, today):
    assert classes_repo.create_a_class(tutoring_context["course_id"], 1, today, "Monday")

    rows = classes_repo.list_tutor_classes(tutoring_context["tutor_discord_id"], today=today)
    assert rows[0]["date"] == today.isoformat()


def test_create_a_class_returns_false_for_unknown_course(tutoring_context, today, caplog):
    with caplog.at_level("ERROR"):
        created = classes_repo.create_a_class(987654, 1, _days_from(today, 1), "Friday")

    assert created is False
    assert "Failed to create class for course 987654" in caplog.text


def test_class_exists_requires_exactly_one_match(tutoring_context, today):
    class_id = insert_class(
        course_id=tutoring_context["course_id"],
        week_number=1,
        date=_days_from(today, 0),
        day="Monday",
    )

    assert count_classes_with_id(class_id) == 1
    assert classes_repo.class_exists(class_id) is True
    assert classes_repo.class_exists(class_id + 1000) is False


def test_list_tutor_classes_filters_window_status_and_tutor(tutoring_context, today):
    course_id = tutoring_context["course_id"]
    recent = insert_class(course_id=course_id, week_number=1, date=_days_from(today, -5), day="Mon")
    boundary = insert_class(course_id=course_id, week_number=2, date=_days_from(today, -10), day="Tue")
    insert_class(course_id=course_id, week_number=3, date=_days_from(today, -11), day="Wed")
    upcoming = insert_class(
        course_id=course_id,
        week_number=4,
        date=_days_from(today, 7),
        day="Thu",
        status=CLASS_STATUS_RESCHEDULED,
    )
    insert_class(
        course_id=course_id,
        week_number=5,
        date=_days_from(today, -1),
        day="Fri",
        status=CLASS_STATUS_COMPLETED,
    )
    insert_class(
        course_id=tutoring_context["other_course_id"],
        week_number=1,
        date=_days_from(today, 1),
        day="Sat",
    )

    rows = classes_repo.list_tutor_classes(tutoring_context["tutor_discord_id"], today=today)

    assert [row["id"] for row in rows] == [boundary, recent, upcoming]
    assert rows[0] == {
        "name": "Grade 10 Chemistry",
        "student": "Noah, Patel",
        "date": _days_from(today, -10),
        "id": boundary,
    }


def test_list_tutor_classes_respects_configured_window(tutoring_context, today, monkeypatch):
    monkeypatch.setenv("CLASS_LOOKBACK_DAYS", "2")
    insert_class(
        course_id=tutoring_context["course_id"],
        week_number=1,
        date=_days_from(today, -5),
        day="Mon",
    )

    assert classes_repo.list_tutor_classes(tutoring_context["tutor_discord_id"], today=today) == []


def test_list_tutor_classes_unknown_tutor_is_empty(tutoring_context, today):
    insert_class(
        course_id=tutoring_context["course_id"],
        week_number=1,
        date=_days_from(today, 1),
        day="Mon",
    )

    assert classes_repo.list_tutor_classes("nobody-0000", today=today) == []


def test_set_status_moves_class_out_of_open_list(tutoring_context, today):
    class_id = insert_class(
        course_id=tutoring_context["course_id"],
        week_number=1,
        date=_days_from(today, 1),
        day="Mon",
    )

    assert classes_repo.set_status(class_id, CLASS_STATUS_COMPLETED) is True
    assert classes_repo.fetch_class(class_id)["status"] == CLASS_STATUS_COMPLETED
    assert classes_repo.list_tutor_classes(tutoring_context["tutor_discord_id"], today=today) == []


def test_set_status_rejects_unknown_status(tutoring_context):
    with pytest.raises(ValueError):
        classes_repo.set_status(1, "Paid")
