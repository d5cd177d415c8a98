#!/usr/bin/env python3
"""
Demo data seeding script for the tutoring classes API

Creates one tutor, one student, a level and a course, then schedules a few
weekly classes around today so that GET /tutors/<discord_id>/classes returns
something useful.

Usage:
    DATABASE_URL=sqlite:///tutoring_dev.sqlite python scripts/seed_demo_data.py [discord_id]
"""

import datetime
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT_DIR))
load_dotenv(ROOT_DIR / ".env", override=True)

from app.repositories import create_a_class  # noqa: E402
from models import (  # noqa: E402
    create_course,
    create_level,
    create_student,
    create_tutor,
    init_db,
)

WEEKS = 4


def seed(discord_id: str) -> int:
    """Seed the demo rows and return the course identifier."""
    init_db()
    tutor_id = create_tutor(discord_id=discord_id, first_name="Ada", last_name="Lovelace")
    student_id = create_student(first_name="Alan", last_name="Turing")
    level_id = create_level("Secondary 4")
    course_id = create_course(
        student_id=student_id,
        tutor_id=tutor_id,
        level_id=level_id,
        subject="Mathematics",
    )

    start = datetime.date.today() - datetime.timedelta(weeks=1)
    for week in range(1, WEEKS + 1):
        class_date = start + datetime.timedelta(weeks=week - 1)
        if not create_a_class(course_id, week, class_date, class_date.strftime("%A")):
            raise RuntimeError(f"Could not create class for week {week}.")
    return course_id


def main() -> None:
    discord_id = sys.argv[1] if len(sys.argv) > 1 else "demo-tutor-0001"
    course_id = seed(discord_id)
    print(f"Seeded course {course_id} with {WEEKS} classes for tutor {discord_id}.")
    print(f"Try: GET /tutors/{discord_id}/classes")


if __name__ == "__main__":
    main()
