"""Existing directory records and candidate import rows.

INVARIANT: Raw string fields of an ImportRow are never None. Missing values
are normalized to ``""`` at construction so every rule guards emptiness
with a single ``not value`` check.

Derived fields (``user_role``, ``workspaces``) are computed once when the
row is built and are never re-parsed by individual rules.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from preloadctl.domain.types import UserRole, parse_role

WORKSPACE_DELIMITER = ","

_RAW_FIELDS = (
    "login",
    "email",
    "phone_number",
    "full_name",
    "password",
    "role",
    "supervisor",
    "workspace",
)


def parse_workspaces(value: str | None) -> tuple[str, ...]:
    """Split a raw workspace column into workspace names.

    Names are trimmed, blanks dropped, order preserved.

    Examples:
        >>> parse_workspaces("primary, field-2")
        ('primary', 'field-2')
        >>> parse_workspaces(" , ")
        ()
    """
    if not value:
        return ()
    names = (part.strip() for part in value.split(WORKSPACE_DELIMITER))
    return tuple(name for name in names if name)


class WorkspaceAssignment(BaseModel):
    """One workspace membership of an existing user."""

    model_config = {"frozen": True}

    workspace_name: str
    supervisor_id: str | None = None


class ExistingUserRecord(BaseModel):
    """Read-only snapshot of a user already present in the directory."""

    model_config = {"frozen": True}

    user_id: str
    user_name: str
    is_archived: bool = False
    is_supervisor: bool = False
    is_interviewer: bool = False
    workspaces: tuple[WorkspaceAssignment, ...] = ()

    def assignment_for(self, workspace_name: str) -> WorkspaceAssignment | None:
        """Return the first assignment to *workspace_name*, if any."""
        for assignment in self.workspaces:
            if assignment.workspace_name == workspace_name:
                return assignment
        return None

    @property
    def workspace_names(self) -> frozenset[str]:
        return frozenset(a.workspace_name for a in self.workspaces)


class ImportRow(BaseModel):
    """One candidate account from the import batch.

    Attributes:
        login: Requested user name (case-insensitive identity).
        role: Raw role column; see ``user_role`` for the parsed value.
        supervisor: Supervisor login, meaningful only for interviewers.
        workspace: Raw workspace column; see ``workspaces`` for the names.
        user_role: Parsed role, derived from ``role``.
        workspaces: Parsed workspace names, derived from ``workspace``.
    """

    model_config = {"frozen": True}

    login: str = ""
    email: str = ""
    phone_number: str = ""
    full_name: str = ""
    password: str = ""
    role: str = ""
    supervisor: str = ""
    workspace: str = ""

    user_role: UserRole = UserRole.UNSET
    workspaces: tuple[str, ...] = Field(default=())

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        values = dict(data)
        for name in _RAW_FIELDS:
            raw = values.get(name)
            if raw is None:
                values[name] = ""
            elif not isinstance(raw, str):
                msg = f"{name} must be a string, got {type(raw).__name__}"
                raise ValueError(msg)
        # Derived fields always follow the raw columns.
        values["user_role"] = parse_role(values["role"])
        values["workspaces"] = parse_workspaces(values["workspace"])
        return values

    @property
    def login_key(self) -> str:
        """Lower-cased login used for every directory and batch lookup."""
        return self.login.lower()
