from __future__ import annotations

import datetime
import logging
from typing import Callable, Optional

from flask import Blueprint, Response, jsonify, request

from app.repositories import (
    class_exists as repo_class_exists,
    create_a_class as repo_create_a_class,
    fetch_class as repo_fetch_class,
    list_tutor_classes as repo_list_tutor_classes,
    set_status as repo_set_status,
)
from models import CLASS_STATUSES, DATABASE_ERRORS

logger = logging.getLogger(__name__)

bp = Blueprint("core", __name__)

ViewResult = tuple[Response, int]


@bp.get("/health")
def health():
    return jsonify({"status": "ok", "service": "tutoring-classes"}), 200


def check_if_class_exists_with_id(class_id: int, callback: Callable[[], ViewResult]):
    """
    Run ``callback`` only if a class with the given ID exists.

    A missing class answers 412 so the bot can tell the ID was wrong;
    a failing query answers 400.
    """
    try:
        exists = repo_class_exists(class_id)
    except DATABASE_ERRORS as exc:
        logger.error(f"Class lookup failed for id {class_id}: {exc}", exc_info=True)
        return jsonify({"error": str(exc)}), 400

    if not exists:
        logger.info(f"No class found with id {class_id}.")
        return jsonify({"error": "There is not class with that ID."}), 412
    return callback()


@bp.get("/tutors/<tutor_discord_id>/classes")
def get_tutor_classes(tutor_discord_id: str):
    """List the tutor's Empty/Rescheduled classes inside the look-back window or upcoming."""
    try:
        classes = repo_list_tutor_classes(tutor_discord_id)
    except DATABASE_ERRORS as exc:
        logger.error(f"Failed to list classes for tutor {tutor_discord_id}: {exc}", exc_info=True)
        return jsonify({"error": str(exc)}), 400
    return jsonify(classes), 200


def _coerce_int(raw: object) -> Optional[int]:
    """Return ``raw`` as an int, or None when it is not a whole number."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str):
        text = raw.strip()
        digits = text[1:] if text.startswith("-") else text
        if digits.isdecimal():
            return int(text)
    return None


def _validate_class_submission(payload: dict[str, object]) -> tuple[dict[str, object], dict[str, str]]:
    cleaned: dict[str, object] = {}
    errors: dict[str, str] = {}

    course_raw = payload.get("course_id")
    week_raw = payload.get("week_number")
    date_raw = payload.get("date")
    day = str(payload.get("day") or "").strip()

    course_id: Optional[int] = None
    if course_raw is None or course_raw == "":
        errors["course_id"] = "Course is required."
    else:
        course_id = _coerce_int(course_raw)
        if course_id is None:
            errors["course_id"] = "Course must be an integer."

    week_number: Optional[int] = None
    if week_raw is None or week_raw == "":
        errors["week_number"] = "Week number is required."
    else:
        week_number = _coerce_int(week_raw)
        if week_number is None:
            errors["week_number"] = "Week number must be an integer."
        elif week_number < 1:
            errors["week_number"] = "Week number must be at least 1."

    date_value: Optional[datetime.date] = None
    if not date_raw:
        errors["date"] = "Date is required."
    else:
        try:
            date_value = datetime.date.fromisoformat(str(date_raw).strip())
        except ValueError:
            errors["date"] = "Date must use the YYYY-MM-DD format."

    if not day:
        errors["day"] = "Day is required."

    if not errors:
        cleaned = {
            "course_id": course_id,
            "week_number": week_number,
            "date": date_value,
            "day": day,
        }
    return cleaned, errors


@bp.post("/classes")
def create_class():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Expected a JSON object."}), 400

    cleaned, errors = _validate_class_submission(payload)
    if errors:
        return jsonify({"errors": errors}), 400

    created = repo_create_a_class(
        cleaned["course_id"],
        cleaned["week_number"],
        cleaned["date"],
        cleaned["day"],
    )
    if not created:
        return jsonify({"error": "Class could not be created."}), 400
    return jsonify({"created": True}), 201


@bp.get("/classes/<int:class_id>")
def get_class(class_id: int):
    def _respond():
        try:
            row = repo_fetch_class(class_id)
        except DATABASE_ERRORS as exc:
            logger.error(f"Failed to fetch class {class_id}: {exc}", exc_info=True)
            return jsonify({"error": str(exc)}), 400
        if row is None:
            return jsonify({"error": "There is not class with that ID."}), 412
        return jsonify(row), 200

    return check_if_class_exists_with_id(class_id, _respond)


@bp.patch("/classes/<int:class_id>/status")
def update_class_status(class_id: int):
    payload = request.get_json(silent=True) or {}
    status = str(payload.get("status", "")).strip() if isinstance(payload, dict) else ""
    if status not in CLASS_STATUSES:
        allowed = ", ".join(CLASS_STATUSES)
        return jsonify({"error": f"status must be one of: {allowed}."}), 400

    def _apply():
        try:
            updated = repo_set_status(class_id, status)
        except DATABASE_ERRORS as exc:
            logger.error(f"Failed to update class {class_id}: {exc}", exc_info=True)
            return jsonify({"error": str(exc)}), 400
        return jsonify({"updated": updated, "status": status}), 200

    return check_if_class_exists_with_id(class_id, _apply)
