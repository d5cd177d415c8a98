"""Data access layer for the tutoring classes API without external ORM dependencies."""

from __future__ import annotations

import datetime
import os
import sqlite3
from typing import Optional, Sequence, Union
from urllib.parse import urlparse

import psycopg
from psycopg.rows import dict_row

from config.settings import get_settings

_connection: Optional[object] = None
_backend: Optional[str] = None  # "sqlite" or "postgres"

DATABASE_ERRORS: tuple[type[Exception], ...] = (sqlite3.Error, psycopg.Error)

CLASS_STATUS_EMPTY = "Empty"
CLASS_STATUS_COMPLETED = "Completed"
CLASS_STATUS_RESCHEDULED = "Rescheduled"
CLASS_STATUS_CANCELLED = "Cancelled"

CLASS_STATUSES = (
    CLASS_STATUS_EMPTY,
    CLASS_STATUS_COMPLETED,
    CLASS_STATUS_RESCHEDULED,
    CLASS_STATUS_CANCELLED,
)
OPEN_CLASS_STATUSES = (CLASS_STATUS_EMPTY, CLASS_STATUS_RESCHEDULED)


def _resolve_default_sqlite_path() -> str:
    root_dir = os.path.dirname(os.path.dirname(__file__))
    return os.path.join(root_dir, "tutoring_dev.sqlite")


def _normalize_sqlite_path(database_url: str) -> str:
    parsed = urlparse(database_url)
    path = parsed.path or ""
    if path.startswith("/"):
        path = path[1:]
    if path in {"", ":memory:"}:
        return ":memory:"
    if parsed.netloc:
        path = os.path.join(parsed.netloc, path)
    return path or _resolve_default_sqlite_path()


def _resolve_database_url(database_url: Optional[str]) -> str:
    """Apply the SQLite default and normalize ``postgres://`` URLs."""
    if not database_url:
        return f"sqlite:///{_resolve_default_sqlite_path()}"
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql://", 1)
    return database_url


def get_connection():
    """Return a singleton database connection."""
    global _connection, _backend
    if _connection is not None:
        return _connection

    database_url = _resolve_database_url(get_settings().DATABASE_URL)

    if database_url.startswith("sqlite"):
        db_path = _normalize_sqlite_path(database_url)
        conn = sqlite3.connect(db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        _connection = conn
        _backend = "sqlite"
    else:
        conn = psycopg.connect(database_url, row_factory=dict_row)
        _connection = conn
        _backend = "postgres"

    return _connection


def get_backend() -> Optional[str]:
    return _backend


def reset_engine() -> None:
    """Reset the current database connection (used in tests)."""
    global _connection, _backend
    if _connection is not None:
        _connection.close()
    _connection = None
    _backend = None


def init_db() -> None:
    """Create the tutoring tables if they do not already exist."""
    conn = get_connection()
    cur = conn.cursor()
    try:
        if _backend == "postgres":
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tutors (
                    id SERIAL PRIMARY KEY,
                    discord_id VARCHAR(64) UNIQUE NOT NULL,
                    first_name VARCHAR(255) NOT NULL,
                    last_name VARCHAR(255) NOT NULL
                );
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS students (
                    id SERIAL PRIMARY KEY,
                    first_name VARCHAR(255) NOT NULL,
                    last_name VARCHAR(255) NOT NULL
                );
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS levels (
                    id SERIAL PRIMARY KEY,
                    name VARCHAR(64) UNIQUE NOT NULL
                );
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS courses (
                    id SERIAL PRIMARY KEY,
                    student_id INTEGER NOT NULL REFERENCES students(id) ON DELETE CASCADE,
                    tutor_id INTEGER NOT NULL REFERENCES tutors(id) ON DELETE CASCADE,
                    level_id INTEGER NOT NULL REFERENCES levels(id),
                    subject VARCHAR(255) NOT NULL
                );
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS classes (
                    id SERIAL PRIMARY KEY,
                    course_id INTEGER NOT NULL REFERENCES courses(id) ON DELETE CASCADE,
                    status VARCHAR(16) NOT NULL,
                    week INTEGER NOT NULL,
                    date VARCHAR(32) NOT NULL,
                    is_paid SMALLINT NOT NULL DEFAULT 0,
                    day VARCHAR(16) NOT NULL
                );
                """
            )
            cur.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_courses_tutor
                ON courses (tutor_id);
                """
            )
            cur.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_classes_course
                ON classes (course_id);
                """
            )
        else:
            cur.executescript(
                """
                CREATE TABLE IF NOT EXISTS tutors (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    discord_id TEXT UNIQUE NOT NULL,
                    first_name TEXT NOT NULL,
                    last_name TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS students (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    first_name TEXT NOT NULL,
                    last_name TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS levels (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT UNIQUE NOT NULL
                );

                CREATE TABLE IF NOT EXISTS courses (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    student_id INTEGER NOT NULL REFERENCES students(id) ON DELETE CASCADE,
                    tutor_id INTEGER NOT NULL REFERENCES tutors(id) ON DELETE CASCADE,
                    level_id INTEGER NOT NULL REFERENCES levels(id),
                    subject TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS classes (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    course_id INTEGER NOT NULL REFERENCES courses(id) ON DELETE CASCADE,
                    status TEXT NOT NULL,
                    week INTEGER NOT NULL,
                    date TEXT NOT NULL,
                    is_paid INTEGER NOT NULL DEFAULT 0,
                    day TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_courses_tutor ON courses (tutor_id);
                CREATE INDEX IF NOT EXISTS idx_classes_course ON classes (course_id);
                """
            )
        conn.commit()
    finally:
        cur.close()


def _prepare(query: str) -> str:
    if _backend == "sqlite":
        return query.replace("%s", "?")
    return query


def _execute_fetchone(query: str, params: tuple) -> Optional[dict]:
    conn = get_connection()
    cur = conn.cursor()
    try:
        cur.execute(_prepare(query), params)
        row = cur.fetchone()
        if row is None:
            return None
        if _backend == "sqlite":
            row = dict(row)
        return row
    except DATABASE_ERRORS:
        conn.rollback()
        raise
    finally:
        cur.close()


def _execute_fetchall(query: str, params: tuple) -> list[dict[str, object]]:
    conn = get_connection()
    cur = conn.cursor()
    try:
        cur.execute(_prepare(query), params)
        rows = cur.fetchall()
        if _backend == "sqlite":
            return [dict(row) for row in rows]
        return list(rows)
    except DATABASE_ERRORS:
        conn.rollback()
        raise
    finally:
        cur.close()


def _insert_returning_id(query: str, params: tuple) -> int:
    """Run an INSERT, commit, and return the new row identifier."""
    conn = get_connection()
    cur = conn.cursor()
    try:
        if _backend == "postgres":
            cur.execute(query.rstrip().rstrip(";") + " RETURNING id;", params)
            new_id = cur.fetchone()["id"]
        else:
            cur.execute(_prepare(query), params)
            new_id = cur.lastrowid
        conn.commit()
    except DATABASE_ERRORS:
        conn.rollback()
        raise
    finally:
        cur.close()
    if new_id is None:
        raise RuntimeError("Row was created but no identifier returned.")
    return int(new_id)


def create_tutor(*, discord_id: str, first_name: str, last_name: str) -> int:
    if not discord_id:
        raise ValueError("Tutor discord_id is required.")
    return _insert_returning_id(
        "INSERT INTO tutors (discord_id, first_name, last_name) VALUES (%s, %s, %s);",
        (discord_id, first_name, last_name),
    )


def create_student(*, first_name: str, last_name: str) -> int:
    return _insert_returning_id(
        "INSERT INTO students (first_name, last_name) VALUES (%s, %s);",
        (first_name, last_name),
    )


def create_level(name: str) -> int:
    if not name:
        raise ValueError("Level name is required.")
    return _insert_returning_id(
        "INSERT INTO levels (name) VALUES (%s);",
        (name,),
    )


def create_course(*, student_id: int, tutor_id: int, level_id: int, subject: str) -> int:
    return _insert_returning_id(
        """
        INSERT INTO courses (student_id, tutor_id, level_id, subject)
        VALUES (%s, %s, %s, %s);
        """,
        (student_id, tutor_id, level_id, subject),
    )


def insert_class(
    *,
    course_id: int,
    week_number: int,
    date: Union[str, datetime.date],
    day: str,
    status: str = CLASS_STATUS_EMPTY,
) -> int:
    """Insert a class row (unpaid) and return its identifier."""
    if status not in CLASS_STATUSES:
        raise ValueError(f"Unknown class status {status!r}.")
    if isinstance(date, datetime.date):
        date = date.isoformat()
    return _insert_returning_id(
        """
        INSERT INTO classes (course_id, status, week, date, is_paid, day)
        VALUES (%s, %s, %s, %s, 0, %s);
        """,
        (course_id, status, week_number, date, day),
    )


def count_classes_with_id(class_id: int) -> int:
    row = _execute_fetchone(
        "SELECT COUNT(id) AS total FROM classes WHERE id = %s;",
        (class_id,),
    )
    if not row:
        return 0
    return int(row["total"] or 0)


def get_class_by_id(class_id: int) -> Optional[dict[str, object]]:
    """Return the class row or None."""
    return _execute_fetchone(
        """
        SELECT id, course_id, status, week, date, is_paid, day
        FROM classes
        WHERE id = %s;
        """,
        (class_id,),
    )


def list_classes_for_tutor(
    tutor_discord_id: str,
    statuses: Sequence[str] = OPEN_CLASS_STATUSES,
) -> list[dict[str, object]]:
    """Return joined class rows for the tutor, restricted to the given statuses."""
    if not statuses:
        return []
    placeholders = ", ".join(["%s"] * len(statuses))
    return _execute_fetchall(
        f"""
        SELECT
            levels.name AS level,
            classes.date AS date,
            courses.subject AS subject,
            students.first_name AS first_name,
            students.last_name AS last_name,
            classes.id AS id
        FROM classes
        INNER JOIN courses ON classes.course_id = courses.id
        INNER JOIN students ON students.id = courses.student_id
        INNER JOIN levels ON courses.level_id = levels.id
        WHERE courses.tutor_id = (SELECT id FROM tutors WHERE discord_id = %s)
          AND classes.status IN ({placeholders})
        ORDER BY classes.date, classes.id;
        """,
        (tutor_discord_id, *statuses),
    )


def update_class_status(class_id: int, status: str) -> bool:
    """Set a class status; return True when a row changed."""
    if status not in CLASS_STATUSES:
        raise ValueError(f"Unknown class status {status!r}.")
    conn = get_connection()
    cur = conn.cursor()
    try:
        cur.execute(
            _prepare("UPDATE classes SET status = %s WHERE id = %s;"),
            (status, class_id),
        )
        conn.commit()
        return cur.rowcount > 0
    except DATABASE_ERRORS:
        conn.rollback()
        raise
    finally:
        cur.close()
