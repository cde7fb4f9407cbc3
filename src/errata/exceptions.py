"""Error types and the capabilities errors may expose to the classifier."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .http import Status

UNKNOWN_ERROR_TYPE = "unknown"
UNKNOWN_ERROR_CODE = 0
JSON_ERROR_TYPE = "json"
JSON_ERROR_CODE = 9001
MARSHALER_ERROR_TYPE = "marshaler"
MARSHALER_ERROR_CODE = 9002
VALIDATION_ERROR_TYPE = "validation"
VALIDATION_ERROR_CODE = 8000


@runtime_checkable
class NamedError(Protocol):
    """An error that supplies its own public name."""

    def error_name(self) -> str: ...


@runtime_checkable
class HTTPEquivError(Protocol):
    """An error that maps onto an HTTP status code."""

    def status_code(self) -> int | None: ...


@runtime_checkable
class CodedError(Protocol):
    """An error that carries a numeric application code."""

    def error_code(self) -> int: ...


class ErrataError(Exception):
    """Base error type."""


class ConfigurationError(ErrataError, ValueError):
    """Raised when an :class:`~errata.config.ErrataConfig` cannot be built."""


class ResponseCommittedError(ErrataError, RuntimeError):
    """Raised when a response sink is written to out of order."""


class AppError(ErrataError):
    """Application error carrying an explicit type, code and HTTP status.

    ``AppError`` implements every classifier capability, so handlers can raise
    it to control exactly what clients see.
    """

    def __init__(
        self,
        description: str = "",
        *,
        type: str = "",
        code: int = UNKNOWN_ERROR_CODE,
        status: int | Status | None = None,
    ) -> None:
        super().__init__(description)
        self.description = description
        self.type = type
        self.code = code
        self.status = int(status) if status is not None else None

    @classmethod
    def new(cls, code: int, type: str, description: str) -> "AppError":
        return cls(description, type=type, code=code)

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(description={self.description!r}, type={self.type!r}, "
            f"code={self.code!r}, status={self.status!r})"
        )

    def error_name(self) -> str:
        return self.type

    def error_code(self) -> int:
        return self.code

    def status_code(self) -> int | None:
        return self.status


def marshaler_error_empty_body(method: str) -> AppError:
    return AppError(
        f"Empty interface is not suitable for {method.upper()} request bodies",
        type=MARSHALER_ERROR_TYPE,
        code=MARSHALER_ERROR_CODE,
        status=Status.INTERNAL_SERVER_ERROR,
    )


def marshaler_error_content_type(content_type: str) -> AppError:
    return AppError(
        f"Content-Type header is {content_type}, not application/json",
        type=MARSHALER_ERROR_TYPE,
        code=MARSHALER_ERROR_CODE,
        status=Status.UNSUPPORTED_MEDIA_TYPE,
    )


def json_error(description: str) -> AppError:
    """Report a request body that could not be decoded as JSON."""

    return AppError(description, type=JSON_ERROR_TYPE, code=JSON_ERROR_CODE, status=Status.BAD_REQUEST)


def method_not_found(description: str) -> AppError:
    return AppError(description, status=Status.NOT_FOUND)


def method_not_allowed(description: str) -> AppError:
    return AppError(f"Method not allowed, {description}", status=Status.METHOD_NOT_ALLOWED)


__all__ = [
    "JSON_ERROR_CODE",
    "JSON_ERROR_TYPE",
    "MARSHALER_ERROR_CODE",
    "MARSHALER_ERROR_TYPE",
    "UNKNOWN_ERROR_CODE",
    "UNKNOWN_ERROR_TYPE",
    "VALIDATION_ERROR_CODE",
    "VALIDATION_ERROR_TYPE",
    "AppError",
    "CodedError",
    "ConfigurationError",
    "ErrataError",
    "HTTPEquivError",
    "NamedError",
    "ResponseCommittedError",
    "json_error",
    "marshaler_error_content_type",
    "marshaler_error_empty_body",
    "method_not_allowed",
    "method_not_found",
]
