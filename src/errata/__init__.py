"""Error classification, error responses and struct validation for HTTP services."""

from .classify import ClassifiedError, ErrorClassifier
from .config import DEFAULT_CONFIG, ErrataConfig
from .exceptions import (
    AppError,
    CodedError,
    ConfigurationError,
    ErrataError,
    HTTPEquivError,
    NamedError,
    ResponseCommittedError,
)
from .responses import (
    BufferedResponseWriter,
    ErrorEncoder,
    ErrorEnvelope,
    ErrorItem,
    Response,
    ResponseWriter,
    accepts_json,
)
from .validation import FieldViolation, Validate, Validator, ValidatorTable, validate

__all__ = [
    "DEFAULT_CONFIG",
    "AppError",
    "BufferedResponseWriter",
    "ClassifiedError",
    "CodedError",
    "ConfigurationError",
    "ErrataConfig",
    "ErrataError",
    "ErrorClassifier",
    "ErrorEncoder",
    "ErrorEnvelope",
    "ErrorItem",
    "FieldViolation",
    "HTTPEquivError",
    "NamedError",
    "Response",
    "ResponseCommittedError",
    "ResponseWriter",
    "Validate",
    "Validator",
    "ValidatorTable",
    "accepts_json",
    "validate",
]
