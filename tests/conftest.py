import datetime
from collections.abc import Iterator

import pytest

from app import create_app
from models import (
    create_course,
    create_level,
    create_student,
    create_tutor,
    reset_engine,
)


@pytest.fixture()
def app(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///:memory:")
    monkeypatch.delenv("CLASS_LOOKBACK_DAYS", raising=False)

    reset_engine()

    application = create_app()
    application.config.update(TESTING=True)

    yield application

    reset_engine()


@pytest.fixture()
def client(app) -> Iterator:
    with app.test_client() as client:
        yield client


@pytest.fixture()
def app_context(app):
    with app.app_context():
        yield


@pytest.fixture()
def today() -> datetime.date:
    return datetime.date.today()


@pytest.fixture()
def tutoring_context(app_context) -> dict[str, object]:
    tutor_id = create_tutor(discord_id="tutor-4821", first_name="Maya", last_name="Chen")
    other_tutor_id = create_tutor(discord_id="tutor-9910", first_name="Liam", last_name="Ortiz")
    student_id = create_student(first_name="Noah", last_name="Patel")
    level_id = create_level("Grade 10")
    course_id = create_course(
        student_id=student_id,
        tutor_id=tutor_id,
        level_id=level_id,
        subject="Chemistry",
    )
    other_course_id = create_course(
        student_id=student_id,
        tutor_id=other_tutor_id,
        level_id=level_id,
        subject="Physics",
    )
    return {
        "tutor_discord_id": "tutor-4821",
        "other_tutor_discord_id": "tutor-9910",
        "course_id": course_id,
        "other_course_id": other_course_id,
    }
