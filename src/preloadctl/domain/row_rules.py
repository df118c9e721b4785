"""Row rule catalog: predicates that need one row plus the directory.

INVARIANT: Login and user-name comparisons are case-insensitive.
INVARIANT: Empty-value guards run before format and length checks, so a
missing value and a malformed value never share a code (PLU0021 vs
PLU0015-PLU0020).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from preloadctl.domain.directory import DirectoryIndex, build_directory_index
from preloadctl.domain.policy import ImportPolicy
from preloadctl.domain.rules import BoundRule, ValidationRule
from preloadctl.domain.types import RuleCode, RuleScope, UserRole
from preloadctl.domain.users import ExistingUserRecord, ImportRow


@dataclass(frozen=True)
class RowRuleContext:
    """Immutable state captured by every row rule."""

    directory: DirectoryIndex
    workspaces: frozenset[str]
    policy: ImportPolicy


# ---------------------------------------------------------------------------
# Directory rules
# ---------------------------------------------------------------------------


def login_used_by_active_user(row: ImportRow, ctx: RowRuleContext) -> bool:
    return row.login_key in ctx.directory.active_user_names


def archived_login_belongs_to_other_team(row: ImportRow, ctx: RowRuleContext) -> bool:
    """An archived interviewer may only come back to the same supervisors.

    For every requested workspace the archived record must hold an
    assignment with a supervisor whose name matches the row's supervisor.
    A supervisor id that no longer resolves is not held against the row.
    """
    if row.user_role != UserRole.INTERVIEWER:
        return False

    archived = ctx.directory.archived_interviewers_by_name.get(row.login_key)
    if archived is None:
        return False

    declared_supervisor = row.supervisor.lower()
    for workspace in row.workspaces:
        assignment = archived.assignment_for(workspace)
        if assignment is None or assignment.supervisor_id is None:
            return True
        supervisor = ctx.directory.users_by_id.get(assignment.supervisor_id)
        if supervisor is not None and supervisor.user_name.lower() != declared_supervisor:
            return True
    return False


def archived_login_exists_in_other_role(row: ImportRow, ctx: RowRuleContext) -> bool:
    match row.user_role:
        case UserRole.INTERVIEWER:
            return row.login_key in ctx.directory.archived_supervisor_names
        case UserRole.SUPERVISOR:
            return row.login_key in ctx.directory.archived_interviewers_by_name
        case _:
            return False


# ---------------------------------------------------------------------------
# Format and length rules
# ---------------------------------------------------------------------------


def login_format_invalid(row: ImportRow, ctx: RowRuleContext) -> bool:
    return ctx.policy.login_pattern.search(row.login) is None


def email_format_invalid(row: ImportRow, ctx: RowRuleContext) -> bool:
    if not row.email:
        return False
    return ctx.policy.email_pattern.search(row.email) is None


def phone_number_format_invalid(row: ImportRow, ctx: RowRuleContext) -> bool:
    if not row.phone_number:
        return False
    return ctx.policy.phone_number_pattern.search(row.phone_number) is None


def role_missing(row: ImportRow, ctx: RowRuleContext) -> bool:
    return row.user_role == UserRole.UNSET


def supervisor_declared_for_supervisor(row: ImportRow, ctx: RowRuleContext) -> bool:
    if row.user_role != UserRole.SUPERVISOR:
        return False
    return bool(row.supervisor)


def full_name_too_long(row: ImportRow, ctx: RowRuleContext) -> bool:
    return len(row.full_name) > ctx.policy.full_name_max_length


def phone_number_too_long(row: ImportRow, ctx: RowRuleContext) -> bool:
    return len(row.phone_number) > ctx.policy.phone_number_max_length


def full_name_has_invalid_symbols(row: ImportRow, ctx: RowRuleContext) -> bool:
    if not row.full_name:
        return False
    return ctx.policy.person_name_pattern.search(row.full_name) is None


# ---------------------------------------------------------------------------
# Password rules
# ---------------------------------------------------------------------------


def password_too_short(row: ImportRow, ctx: RowRuleContext) -> bool:
    return bool(row.password) and len(row.password) < ctx.policy.password.required_length


def password_lacks_non_alphanumeric(row: ImportRow, ctx: RowRuleContext) -> bool:
    return (
        ctx.policy.password.require_non_alphanumeric
        and bool(row.password)
        and all(ch.isalpha() or ch.isdecimal() for ch in row.password)
    )


def password_lacks_digit(row: ImportRow, ctx: RowRuleContext) -> bool:
    return (
        ctx.policy.password.require_digit
        and bool(row.password)
        and not any(ch.isdecimal() for ch in row.password)
    )


def password_lacks_lowercase(row: ImportRow, ctx: RowRuleContext) -> bool:
    return (
        ctx.policy.password.require_lowercase
        and bool(row.password)
        and not any(ch.islower() for ch in row.password)
    )


def password_lacks_uppercase(row: ImportRow, ctx: RowRuleContext) -> bool:
    return (
        ctx.policy.password.require_uppercase
        and bool(row.password)
        and not any(ch.isupper() for ch in row.password)
    )


def password_lacks_unique_chars(row: ImportRow, ctx: RowRuleContext) -> bool:
    required = ctx.policy.password.required_unique_chars
    return required >= 1 and bool(row.password) and len(set(row.password)) < required


def password_missing(row: ImportRow, ctx: RowRuleContext) -> bool:
    return not row.password


# ---------------------------------------------------------------------------
# Workspace rules
# ---------------------------------------------------------------------------


def workspace_unknown(row: ImportRow, ctx: RowRuleContext) -> bool:
    if not row.workspace.strip():
        return False
    return any(name not in ctx.workspaces for name in row.workspaces)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


def _row_rule(
    code: RuleCode,
    field: str,
    check: Callable[[ImportRow, RowRuleContext], bool],
    description: str,
) -> ValidationRule[RowRuleContext]:
    return ValidationRule(
        code=code, field=field, check=check, scope=RuleScope.ROW, description=description
    )


ROW_RULES: tuple[ValidationRule[RowRuleContext], ...] = (
    _row_rule(
        RuleCode.LOGIN_TAKEN,
        "login",
        login_used_by_active_user,
        "Login is used by an active user",
    ),
    _row_rule(
        RuleCode.ARCHIVED_LOGIN_OTHER_TEAM,
        "login",
        archived_login_belongs_to_other_team,
        "Archived interviewer login is reused under another team",
    ),
    _row_rule(
        RuleCode.ARCHIVED_LOGIN_OTHER_ROLE,
        "login",
        archived_login_exists_in_other_role,
        "Archived login is reused in another role",
    ),
    _row_rule(RuleCode.LOGIN_FORMAT, "login", login_format_invalid, "Login format is invalid"),
    _row_rule(RuleCode.EMAIL_FORMAT, "email", email_format_invalid, "Email format is invalid"),
    _row_rule(
        RuleCode.PHONE_FORMAT,
        "phone_number",
        phone_number_format_invalid,
        "Phone number format is invalid",
    ),
    _row_rule(RuleCode.ROLE_MISSING, "role", role_missing, "Role is missing or unknown"),
    _row_rule(
        RuleCode.SUPERVISOR_NOT_ALLOWED,
        "supervisor",
        supervisor_declared_for_supervisor,
        "Supervisor column must be empty for supervisors",
    ),
    _row_rule(
        RuleCode.FULL_NAME_LENGTH, "full_name", full_name_too_long, "Full name is too long"
    ),
    _row_rule(
        RuleCode.PHONE_LENGTH, "phone_number", phone_number_too_long, "Phone number is too long"
    ),
    _row_rule(
        RuleCode.FULL_NAME_SYMBOLS,
        "full_name",
        full_name_has_invalid_symbols,
        "Full name contains invalid characters",
    ),
    _row_rule(
        RuleCode.PASSWORD_LENGTH, "password", password_too_short, "Password is too short"
    ),
    _row_rule(
        RuleCode.PASSWORD_NON_ALPHANUMERIC,
        "password",
        password_lacks_non_alphanumeric,
        "Password needs a non-alphanumeric character",
    ),
    _row_rule(
        RuleCode.PASSWORD_DIGIT, "password", password_lacks_digit, "Password needs a digit"
    ),
    _row_rule(
        RuleCode.PASSWORD_LOWERCASE,
        "password",
        password_lacks_lowercase,
        "Password needs a lowercase letter",
    ),
    _row_rule(
        RuleCode.PASSWORD_UPPERCASE,
        "password",
        password_lacks_uppercase,
        "Password needs an uppercase letter",
    ),
    _row_rule(
        RuleCode.PASSWORD_UNIQUE_CHARS,
        "password",
        password_lacks_unique_chars,
        "Password has too few distinct characters",
    ),
    _row_rule(
        RuleCode.PASSWORD_REQUIRED, "password", password_missing, "Password is required"
    ),
    _row_rule(
        RuleCode.WORKSPACE_UNKNOWN,
        "workspace",
        workspace_unknown,
        "Workspace does not exist",
    ),
)


def build_row_rules(
    existing_users: Iterable[ExistingUserRecord],
    workspaces: Iterable[str],
    policy: ImportPolicy,
    *,
    directory: DirectoryIndex | None = None,
) -> list[BoundRule]:
    """Bind every row rule to the directory, workspaces and policy.

    Pass a prebuilt *directory* to share one index between catalogs.
    """
    if directory is None:
        directory = build_directory_index(existing_users)
    context = RowRuleContext(
        directory=directory,
        workspaces=frozenset(workspaces),
        policy=policy,
    )
    return [rule.bind(context) for rule in ROW_RULES]
