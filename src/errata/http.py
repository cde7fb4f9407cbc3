"""HTTP status helpers used when classifying errors."""

from __future__ import annotations

from enum import IntEnum
from http import HTTPStatus as _HTTPStatus


class Status(IntEnum):
    """Enumeration of the HTTP status codes errata produces itself."""

    OK = 200
    BAD_REQUEST = 400
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    UNSUPPORTED_MEDIA_TYPE = 415
    INTERNAL_SERVER_ERROR = 500


def ensure_status(status: int | Status) -> int:
    """Normalize ``status`` to an ``int`` and ensure it is within the HTTP range."""

    code = int(status)
    if code < 100 or code > 599:
        raise ValueError(f"Invalid HTTP status code: {status}")
    return code


def is_valid_status(status: object) -> bool:
    """Return ``True`` if ``status`` is an integer within the HTTP range."""

    if isinstance(status, bool) or not isinstance(status, int):
        return False
    return 100 <= status <= 599


def reason_phrase(status: int | Status) -> str:
    """Return the HTTP reason phrase for ``status`` if known."""

    try:
        code = ensure_status(status)
    except ValueError:
        return "Unknown Status"
    try:
        return _HTTPStatus(code).phrase
    except ValueError:
        return "Unknown Status"


def snake_case_phrase(status: int | Status) -> str:
    """Return the reason phrase for ``status`` as ``lower_snake_case``.

    ``404`` becomes ``not_found`` and ``415`` becomes ``unsupported_media_type``.
    """

    return reason_phrase(status).lower().replace(" ", "_")


__all__ = [
    "Status",
    "ensure_status",
    "is_valid_status",
    "reason_phrase",
    "snake_case_phrase",
]
