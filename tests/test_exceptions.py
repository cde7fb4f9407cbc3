from __future__ import annotations

from errata.exceptions import (
    JSON_ERROR_CODE,
    MARSHALER_ERROR_CODE,
    AppError,
    CodedError,
    HTTPEquivError,
    NamedError,
    json_error,
    marshaler_error_content_type,
    marshaler_error_empty_body,
    method_not_allowed,
    method_not_found,
)


def test_app_error_implements_capabilities() -> None:
    error = AppError("broken", type="storage", code=77, status=503)
    assert isinstance(error, NamedError)
    assert isinstance(error, HTTPEquivError)
    assert isinstance(error, CodedError)
    assert error.error_name() == "storage"
    assert error.error_code() == 77
    assert error.status_code() == 503
    assert str(error) == "broken"
    assert "storage" in repr(error)


def test_app_error_new_leaves_status_unset() -> None:
    error = AppError.new(12, "quota", "quota exceeded")
    assert (error.code, error.type, error.description) == (12, "quota", "quota exceeded")
    assert error.status_code() is None


def test_marshaler_errors() -> None:
    empty = marshaler_error_empty_body("post")
    assert empty.status == 500
    assert empty.code == MARSHALER_ERROR_CODE
    assert empty.description == "Empty interface is not suitable for POST request bodies"

    content_type = marshaler_error_content_type("text/html")
    assert content_type.status == 415
    assert content_type.type == "marshaler"
    assert content_type.description == "Content-Type header is text/html, not application/json"


def test_json_and_method_errors() -> None:
    decoded = json_error("unexpected end of input")
    assert (decoded.type, decoded.code, decoded.status) == ("json", JSON_ERROR_CODE, 400)

    missing = method_not_found("GET /nope not found")
    assert missing.status == 404
    assert missing.type == ""

    not_allowed = method_not_allowed("only GET")
    assert not_allowed.status == 405
    assert str(not_allowed) == "Method not allowed, only GET"
