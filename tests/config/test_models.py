"""Tests for the configuration section models."""

import pytest
from pydantic import ValidationError

from preloadctl.config.models import EvaluationConfig, FormatConfig, PasswordConfig
from preloadctl.domain.policy import DEFAULT_LOGIN_FORMAT


class TestDefaults:
    def test_section_defaults(self) -> None:
        formats = FormatConfig()
        assert formats.login_format == DEFAULT_LOGIN_FORMAT
        assert formats.full_name_max_length == 100
        assert formats.phone_number_max_length == 15
        password = PasswordConfig()
        assert password.required_length == 6
        assert password.require_uppercase is True
        assert password.required_unique_chars == 1
        assert EvaluationConfig().workers == 1

    def test_sparse_override(self) -> None:
        password = PasswordConfig.model_validate({"require_digit": False})
        assert password.require_digit is False
        assert password.require_lowercase is True


class TestValidation:
    def test_negative_length_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FormatConfig(full_name_max_length=-1)

    def test_negative_password_length_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PasswordConfig(required_length=-3)

    def test_workers_minimum(self) -> None:
        with pytest.raises(ValidationError):
            EvaluationConfig(workers=0)

    def test_frozen(self) -> None:
        cfg = PasswordConfig()
        with pytest.raises(ValidationError):
            cfg.required_length = 9  # type: ignore[misc]
