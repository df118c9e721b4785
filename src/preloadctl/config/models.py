"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, preloadctl.toml only contains
overrides. An empty file (or no file) yields the stock import policy.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from preloadctl.domain.policy import (
    DEFAULT_EMAIL_FORMAT,
    DEFAULT_FULL_NAME_MAX_LENGTH,
    DEFAULT_LOGIN_FORMAT,
    DEFAULT_PERSON_NAME_FORMAT,
    DEFAULT_PHONE_NUMBER_FORMAT,
    DEFAULT_PHONE_NUMBER_MAX_LENGTH,
)

# --- preloadctl.toml sections ---


class FormatConfig(BaseModel):
    """[formats] section."""

    model_config = {"frozen": True}

    login_format: str = DEFAULT_LOGIN_FORMAT
    email_format: str = DEFAULT_EMAIL_FORMAT
    phone_number_format: str = DEFAULT_PHONE_NUMBER_FORMAT
    person_name_format: str = DEFAULT_PERSON_NAME_FORMAT
    full_name_max_length: int = Field(default=DEFAULT_FULL_NAME_MAX_LENGTH, ge=0)
    phone_number_max_length: int = Field(default=DEFAULT_PHONE_NUMBER_MAX_LENGTH, ge=0)


class PasswordConfig(BaseModel):
    """[password] section."""

    model_config = {"frozen": True}

    required_length: int = Field(default=6, ge=0)
    require_non_alphanumeric: bool = True
    require_digit: bool = True
    require_lowercase: bool = True
    require_uppercase: bool = True
    required_unique_chars: int = Field(default=1, ge=0)


class EvaluationConfig(BaseModel):
    """[evaluation] section."""

    model_config = {"frozen": True}

    workers: int = Field(default=1, ge=1)

