"""Database repository helpers for the tutoring classes API."""

from .classes_repo import (
    class_exists,
    create_a_class,
    fetch_class,
    list_tutor_classes,
    set_status,
)

__all__ = [
    "class_exists",
    "create_a_class",
    "fetch_class",
    "list_tutor_classes",
    "set_status",
]
