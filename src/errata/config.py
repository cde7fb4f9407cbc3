"""Configuration for error classification and validation."""

from __future__ import annotations

import os
from typing import Any, Mapping

import msgspec
from msgspec import Struct, structs

from .exceptions import VALIDATION_ERROR_CODE, VALIDATION_ERROR_TYPE, ConfigurationError


class ErrataConfig(Struct, frozen=True):
    """Settings shared by :class:`~errata.classify.ErrorClassifier` and friends.

    Build one instance at startup and hand it to every classifier, encoder and
    validator. Instances are immutable, so a config cannot drift while requests
    are being served.
    """

    snake_case_http_equiv_errors: bool = False
    validation_error_code: int = VALIDATION_ERROR_CODE
    validation_error_name: str = VALIDATION_ERROR_TYPE
    fallback_error_name: str = "error"
    max_validation_depth: int = 32

    def __post_init__(self) -> None:
        if self.max_validation_depth < 1:
            raise ConfigurationError(
                f"max_validation_depth must be positive, got {self.max_validation_depth}"
            )
        if not self.fallback_error_name:
            raise ConfigurationError("fallback_error_name must not be empty")

    def with_validation_error(self, code: int, name: str) -> "ErrataConfig":
        """Return a copy reporting violations with ``code`` and ``name``."""

        return structs.replace(self, validation_error_code=code, validation_error_name=name)

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        prefix: str = "ERRATA_",
    ) -> "ErrataConfig":
        """Build a config from ``ERRATA_*`` variables, falling back to defaults."""

        source = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for name in cls.__struct_fields__:
            raw = source.get(f"{prefix}{name.upper()}")
            if raw is None or raw == "":
                continue
            values[name] = raw.strip()
        try:
            return msgspec.convert(values, type=cls, strict=False)
        except msgspec.ValidationError as exc:
            raise ConfigurationError(f"Invalid errata configuration: {exc}") from exc


DEFAULT_CONFIG = ErrataConfig()


__all__ = ["DEFAULT_CONFIG", "ErrataConfig"]
