"""Compiled import policy: format patterns and password strength.

The policy is compiled once, before any row is evaluated. A malformed
pattern or a missing password policy is a configuration defect and raises
:class:`PolicyConfigError`; it is never reported as a row violation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_LOGIN_FORMAT = r"^[a-zA-Z0-9_]{3,15}$"
DEFAULT_EMAIL_FORMAT = (
    r"^[A-Z0-9._%+\-']+@[A-Z0-9](?:[A-Z0-9\-]*[A-Z0-9])?(?:\.[A-Z0-9](?:[A-Z0-9\-]*[A-Z0-9])?)*"
    r"\.[A-Z]{2,}$"
)
DEFAULT_PHONE_NUMBER_FORMAT = (
    r"^(\+\s?)?(\(\+?\d+([\s\-.]?\d+)?\)|\d+)([\s\-.]?(\(\d+([\s\-.]?\d+)?\)|\d+))*"
    r"(\s?(x|ext\.?)\s?\d+)?$"
)
DEFAULT_PERSON_NAME_FORMAT = r"^(?:[^\W\d_]|[ '.\-])+$"
DEFAULT_FULL_NAME_MAX_LENGTH = 100
DEFAULT_PHONE_NUMBER_MAX_LENGTH = 15


class PolicyConfigError(ValueError):
    """Raised when the import policy cannot be compiled."""


@dataclass(frozen=True)
class PasswordPolicy:
    """Password strength requirements."""

    required_length: int = 6
    require_non_alphanumeric: bool = True
    require_digit: bool = True
    require_lowercase: bool = True
    require_uppercase: bool = True
    required_unique_chars: int = 1


@dataclass(frozen=True)
class ImportPolicy:
    """Immutable, compiled policy shared by all row rules during a run."""

    login_pattern: re.Pattern[str]
    email_pattern: re.Pattern[str]
    phone_number_pattern: re.Pattern[str]
    person_name_pattern: re.Pattern[str]
    full_name_max_length: int
    phone_number_max_length: int
    password: PasswordPolicy


def _compile(name: str, pattern: str, flags: int = 0) -> re.Pattern[str]:
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        msg = f"Invalid {name} pattern {pattern!r}: {exc}"
        raise PolicyConfigError(msg) from exc


def compile_policy(
    *,
    password: PasswordPolicy | None,
    login_format: str = DEFAULT_LOGIN_FORMAT,
    email_format: str = DEFAULT_EMAIL_FORMAT,
    phone_number_format: str = DEFAULT_PHONE_NUMBER_FORMAT,
    person_name_format: str = DEFAULT_PERSON_NAME_FORMAT,
    full_name_max_length: int = DEFAULT_FULL_NAME_MAX_LENGTH,
    phone_number_max_length: int = DEFAULT_PHONE_NUMBER_MAX_LENGTH,
) -> ImportPolicy:
    """Compile format patterns and bundle them with the password policy.

    The login pattern is compiled as given; email, phone and person-name
    patterns are case-insensitive.

    Raises:
        PolicyConfigError: A pattern does not compile, a maximum length is
            negative, or no password policy was supplied.
    """
    if password is None:
        raise PolicyConfigError("Password policy is not configured")
    if full_name_max_length < 0 or phone_number_max_length < 0:
        raise PolicyConfigError("Maximum field lengths must be non-negative")

    return ImportPolicy(
        login_pattern=_compile("login", login_format),
        email_pattern=_compile("email", email_format, re.IGNORECASE),
        phone_number_pattern=_compile("phone number", phone_number_format, re.IGNORECASE),
        person_name_pattern=_compile("person name", person_name_format, re.IGNORECASE),
        full_name_max_length=full_name_max_length,
        phone_number_max_length=phone_number_max_length,
        password=password,
    )


def default_policy() -> ImportPolicy:
    """Policy built entirely from code defaults."""
    return compile_policy(password=PasswordPolicy())
