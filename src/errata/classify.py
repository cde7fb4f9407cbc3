"""Classify arbitrary exceptions into a stable public shape."""

from __future__ import annotations

import logging
from typing import Any

from msgspec import Struct

from .config import DEFAULT_CONFIG, ErrataConfig
from .exceptions import UNKNOWN_ERROR_CODE, AppError
from .http import Status, is_valid_status, snake_case_phrase

logger = logging.getLogger(__name__)


class ClassifiedError(Struct, frozen=True):
    """Public view of an error: what clients are told went wrong."""

    type_name: str
    code: int = UNKNOWN_ERROR_CODE
    description: str = ""
    http_status: int = int(Status.INTERNAL_SERVER_ERROR)


def _probe(err: BaseException, capability: str) -> Any:
    member = getattr(err, capability, None)
    if member is None or not callable(member):
        return member
    try:
        return member()
    except Exception:
        logger.debug("Capability %s on %r failed", capability, err, exc_info=True)
        return None


def _http_equiv_status(err: BaseException) -> int | None:
    status = _probe(err, "status_code")
    if is_valid_status(status):
        return status
    return None


def _type_name(err: BaseException, fallback: str) -> str:
    cls = type(err)
    name = cls.__name__
    if name[:1] == "_" or name[:1].islower():
        return fallback
    module = cls.__module__
    if not module or module == "builtins":
        return cls.__qualname__
    return f"{module}.{cls.__qualname__}"


def error_name(err: BaseException, fallback: str, *, snake_case_http_equiv: bool = False) -> str:
    """Resolve the public name of ``err``.

    The error's own ``error_name()`` wins when it returns a non-empty string.
    Otherwise, when ``snake_case_http_equiv`` is set, errors exposing an HTTP
    status are named after its reason phrase (``not_found``). Failing both, the
    fully qualified class name is used, or ``fallback`` for private classes.
    """

    name = _probe(err, "error_name")
    if isinstance(name, str) and name:
        return name
    if snake_case_http_equiv:
        status = _http_equiv_status(err)
        if status is not None:
            return snake_case_phrase(status)
    return _type_name(err, fallback)


def error_status_code(err: BaseException) -> int:
    """Resolve the HTTP status for ``err``, defaulting to 500."""

    if isinstance(err, AppError) and is_valid_status(err.status):
        return err.status  # type: ignore[return-value]
    status = _http_equiv_status(err)
    if status is not None:
        return status
    return int(Status.INTERNAL_SERVER_ERROR)


def error_code(err: BaseException) -> int:
    if isinstance(err, AppError):
        return err.code
    code = _probe(err, "error_code")
    if isinstance(code, int) and not isinstance(code, bool):
        return code
    return UNKNOWN_ERROR_CODE


def error_message(err: BaseException) -> str:
    """Return ``str(err)``, or an empty string when ``__str__`` itself fails."""

    try:
        return str(err)
    except Exception:
        logger.debug("Could not render message of %s", type(err).__qualname__, exc_info=True)
        return ""


def error_description(err: BaseException) -> str:
    if isinstance(err, AppError):
        return err.description
    return error_message(err)


class ErrorClassifier:
    """Resolve exceptions to :class:`ClassifiedError` using a fixed config."""

    __slots__ = ("config",)

    def __init__(self, config: ErrataConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def name(self, err: BaseException) -> str:
        return error_name(
            err,
            self.config.fallback_error_name,
            snake_case_http_equiv=self.config.snake_case_http_equiv_errors,
        )

    def status(self, err: BaseException) -> int:
        return error_status_code(err)

    def classify(self, err: BaseException) -> ClassifiedError:
        return ClassifiedError(
            type_name=self.name(err),
            code=error_code(err),
            description=error_description(err),
            http_status=self.status(err),
        )


__all__ = [
    "ClassifiedError",
    "ErrorClassifier",
    "error_code",
    "error_description",
    "error_message",
    "error_name",
    "error_status_code",
]
