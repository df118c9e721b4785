"""Roles and rule codes.

Rule codes are part of the external report contract. They are never
renumbered; gaps (PLU0006) are retired codes.
"""

from __future__ import annotations

from enum import StrEnum


class UserRole(StrEnum):
    """Role requested for an imported account."""

    UNSET = "unset"
    INTERVIEWER = "interviewer"
    SUPERVISOR = "supervisor"


class RuleScope(StrEnum):
    """Whether a rule needs a single row or the whole batch."""

    ROW = "row"
    DATASET = "dataset"


class RuleCode(StrEnum):
    """Stable identifiers of the verification rules."""

    LOGIN_TAKEN = "PLU0001"
    LOGIN_DUPLICATED = "PLU0002"
    ARCHIVED_LOGIN_OTHER_TEAM = "PLU0003"
    ARCHIVED_LOGIN_OTHER_ROLE = "PLU0004"
    LOGIN_FORMAT = "PLU0005"
    EMAIL_FORMAT = "PLU0007"
    PHONE_FORMAT = "PLU0008"
    ROLE_MISSING = "PLU0009"
    SUPERVISOR_INVALID = "PLU0010"
    SUPERVISOR_NOT_ALLOWED = "PLU0011"
    FULL_NAME_LENGTH = "PLU0012"
    PHONE_LENGTH = "PLU0013"
    FULL_NAME_SYMBOLS = "PLU0014"
    PASSWORD_LENGTH = "PLU0015"
    PASSWORD_NON_ALPHANUMERIC = "PLU0016"
    PASSWORD_DIGIT = "PLU0017"
    PASSWORD_LOWERCASE = "PLU0018"
    PASSWORD_UPPERCASE = "PLU0019"
    PASSWORD_UNIQUE_CHARS = "PLU0020"
    PASSWORD_REQUIRED = "PLU0021"
    WORKSPACE_UNKNOWN = "PLU0022"


def parse_role(value: str | None) -> UserRole:
    """Map a raw role column to :class:`UserRole`.

    Matching is case-insensitive and ignores surrounding whitespace.
    Anything other than ``interviewer`` or ``supervisor`` is ``UNSET``.

    Examples:
        >>> parse_role("Supervisor")
        <UserRole.SUPERVISOR: 'supervisor'>
        >>> parse_role("headquarters")
        <UserRole.UNSET: 'unset'>
    """
    normalized = (value or "").strip().lower()
    if normalized == UserRole.INTERVIEWER:
        return UserRole.INTERVIEWER
    if normalized == UserRole.SUPERVISOR:
        return UserRole.SUPERVISOR
    return UserRole.UNSET
