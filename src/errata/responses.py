"""Render classified errors and validation violations onto a response."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Protocol, runtime_checkable

import msgspec

from .classify import ClassifiedError, ErrorClassifier, error_message
from .config import ErrataConfig
from .exceptions import UNKNOWN_ERROR_CODE, ResponseCommittedError
from .http import Status, ensure_status
from .serialization import json_encode
from .validation import FieldViolation

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain"

Headers = tuple[tuple[str, str], ...]


class ErrorItem(msgspec.Struct, frozen=True, omit_defaults=True, rename="camel"):
    """One entry of the ``errors`` array sent to clients."""

    error: str
    error_code: int = UNKNOWN_ERROR_CODE
    field: str = ""
    description: str = ""

    @classmethod
    def from_classified(cls, classified: ClassifiedError) -> "ErrorItem":
        return cls(
            error=classified.type_name,
            error_code=classified.code,
            description=classified.description,
        )

    @classmethod
    def from_violation(cls, violation: FieldViolation) -> "ErrorItem":
        return cls(
            error=violation.error_name,
            error_code=violation.error_code,
            field=violation.field,
            description=violation.description,
        )


class ErrorEnvelope(msgspec.Struct, frozen=True):
    """The single JSON shape used for every error response."""

    errors: tuple[ErrorItem, ...] = ()


class Response(msgspec.Struct, frozen=True):
    """Immutable response payload."""

    status: int = int(Status.OK)
    headers: Headers = ()
    body: bytes = b""

    def header(self, name: str, default: str | None = None) -> str | None:
        lowered = name.lower()
        for key, value in self.headers:
            if key == lowered:
                return value
        return default


@runtime_checkable
class ResponseWriter(Protocol):
    """Destination for one response: headers, then the status line, then the body."""

    def set_header(self, name: str, value: str) -> None: ...

    def write_header(self, status: int) -> None: ...

    def write(self, data: bytes) -> int: ...


class BufferedResponseWriter:
    """In-memory :class:`ResponseWriter` that enforces write ordering."""

    __slots__ = ("_body", "_headers", "status")

    def __init__(self) -> None:
        self._headers: dict[str, str] = {}
        self._body = bytearray()
        self.status: int | None = None

    @property
    def committed(self) -> bool:
        return self.status is not None

    def set_header(self, name: str, value: str) -> None:
        if self.committed:
            raise ResponseCommittedError(f"Cannot set header {name!r} after the status line was written")
        self._headers[name.lower()] = value

    def header(self, name: str, default: str | None = None) -> str | None:
        return self._headers.get(name.lower(), default)

    def write_header(self, status: int) -> None:
        if self.committed:
            raise ResponseCommittedError(f"Status line already written ({self.status})")
        self.status = ensure_status(status)

    def write(self, data: bytes) -> int:
        if not self.committed:
            self.write_header(Status.OK)
        self._body.extend(data)
        return len(data)

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    def to_response(self) -> Response:
        return Response(
            status=self.status if self.status is not None else int(Status.OK),
            headers=tuple(self._headers.items()),
            body=self.body,
        )


def _accept_header(source: Any) -> str:
    headers = getattr(source, "headers", source)
    if not isinstance(headers, Mapping):
        return ""
    for key, value in headers.items():
        if str(key).lower() == "accept":
            return str(value or "")
    return ""


def accepts_json(headers: Mapping[str, str] | Any) -> bool:
    """Return ``True`` when the client should be answered with JSON.

    A missing ``Accept`` header means JSON. Otherwise the header must contain
    ``*/*`` or ``application/json``; this is a substring check, not media
    range parsing, so quality values are ignored.
    """

    accept = _accept_header(headers)
    if not accept:
        return True
    return "*/*" in accept or JSON_CONTENT_TYPE in accept


def _single_line(text: str) -> str:
    return " ".join(text.splitlines())


class ErrorEncoder:
    """Write error responses for one classifier configuration.

    Every ``write_*`` method is terminal: it sets the content type, commits the
    status line and writes the body. Call at most one per response.
    """

    __slots__ = ("classifier",)

    def __init__(
        self,
        classifier: ErrorClassifier | None = None,
        *,
        config: ErrataConfig | None = None,
    ) -> None:
        self.classifier = classifier or ErrorClassifier(config)

    def write_json_error(self, writer: ResponseWriter, err: BaseException) -> None:
        classified = self.classifier.classify(err)
        envelope = ErrorEnvelope(errors=(ErrorItem.from_classified(classified),))
        self._write_json(writer, classified.http_status, envelope)

    def write_validation_errors(self, writer: ResponseWriter, violations: Iterable[FieldViolation]) -> None:
        envelope = ErrorEnvelope(errors=tuple(ErrorItem.from_violation(v) for v in violations))
        self._write_json(writer, int(Status.BAD_REQUEST), envelope)

    def write_plaintext_error(self, writer: ResponseWriter, err: BaseException) -> None:
        writer.set_header("content-type", TEXT_CONTENT_TYPE)
        writer.write_header(self.classifier.status(err))
        line = _single_line(f"{self.classifier.name(err)}: {error_message(err)}")
        try:
            writer.write(line.encode("utf-8", errors="backslashreplace"))
        except OSError:
            logger.exception("Error writing plaintext error response")

    def write_error(self, writer: ResponseWriter, headers: Mapping[str, str] | Any, err: BaseException) -> None:
        """Write ``err`` as JSON or plain text depending on ``headers``."""

        if accepts_json(headers):
            self.write_json_error(writer, err)
        else:
            self.write_plaintext_error(writer, err)

    def _write_json(self, writer: ResponseWriter, status: int, envelope: ErrorEnvelope) -> None:
        writer.set_header("content-type", JSON_CONTENT_TYPE)
        writer.write_header(status)
        try:
            writer.write(json_encode(envelope))
        except (msgspec.EncodeError, UnicodeEncodeError, OSError):
            logger.exception("Error marshalling error response into JSON output")


__all__ = [
    "JSON_CONTENT_TYPE",
    "TEXT_CONTENT_TYPE",
    "BufferedResponseWriter",
    "ErrorEncoder",
    "ErrorEnvelope",
    "ErrorItem",
    "Response",
    "ResponseWriter",
    "accepts_json",
]
