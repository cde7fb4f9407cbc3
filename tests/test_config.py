from __future__ import annotations

import pytest

from errata.config import DEFAULT_CONFIG, ErrataConfig
from errata.exceptions import VALIDATION_ERROR_CODE, VALIDATION_ERROR_TYPE, ConfigurationError


def test_defaults() -> None:
    config = ErrataConfig()
    assert config == DEFAULT_CONFIG
    assert config.snake_case_http_equiv_errors is False
    assert config.validation_error_code == VALIDATION_ERROR_CODE
    assert config.validation_error_name == VALIDATION_ERROR_TYPE
    assert config.fallback_error_name == "error"


def test_with_validation_error_returns_copy() -> None:
    config = ErrataConfig(snake_case_http_equiv_errors=True)
    updated = config.with_validation_error(4000, "invalid")
    assert updated.validation_error_code == 4000
    assert updated.validation_error_name == "invalid"
    assert updated.snake_case_http_equiv_errors is True
    assert config.validation_error_code == VALIDATION_ERROR_CODE


def test_from_environ_converts_strings() -> None:
    config = ErrataConfig.from_environ(
        {
            "ERRATA_SNAKE_CASE_HTTP_EQUIV_ERRORS": "true",
            "ERRATA_VALIDATION_ERROR_CODE": "4100",
            "ERRATA_VALIDATION_ERROR_NAME": "bad_field",
            "ERRATA_MAX_VALIDATION_DEPTH": " 8 ",
            "UNRELATED": "ignored",
        }
    )
    assert config.snake_case_http_equiv_errors is True
    assert config.validation_error_code == 4100
    assert config.validation_error_name == "bad_field"
    assert config.max_validation_depth == 8
    assert config.fallback_error_name == "error"


def test_from_environ_custom_prefix_and_blank_values() -> None:
    config = ErrataConfig.from_environ({"APP_FALLBACK_ERROR_NAME": "oops", "APP_VALIDATION_ERROR_CODE": ""}, prefix="APP_")
    assert config.fallback_error_name == "oops"
    assert config.validation_error_code == VALIDATION_ERROR_CODE


def test_from_environ_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ERRATA_SNAKE_CASE_HTTP_EQUIV_ERRORS", "1")
    assert ErrataConfig.from_environ().snake_case_http_equiv_errors is True


@pytest.mark.parametrize(
    "environ",
    [
        {"ERRATA_VALIDATION_ERROR_CODE": "not-a-number"},
        {"ERRATA_SNAKE_CASE_HTTP_EQUIV_ERRORS": "perhaps"},
        {"ERRATA_MAX_VALIDATION_DEPTH": "0"},
    ],
)
def test_from_environ_rejects_malformed_values(environ: dict[str, str]) -> None:
    with pytest.raises(ConfigurationError):
        ErrataConfig.from_environ(environ)


def test_invalid_config_rejected_on_construction() -> None:
    with pytest.raises(ConfigurationError):
        ErrataConfig(max_validation_depth=0)
    with pytest.raises(ConfigurationError):
        ErrataConfig(fallback_error_name="")
