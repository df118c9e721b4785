"""Dataset rule catalog: predicates that need the whole import batch.

INVARIANT: The batch is captured as a tuple when the rules are bound and
is treated as immutable for the rest of the run.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from preloadctl.domain.directory import DirectoryIndex, build_directory_index
from preloadctl.domain.rules import BoundRule, ValidationRule
from preloadctl.domain.types import RuleCode, RuleScope, UserRole
from preloadctl.domain.users import ExistingUserRecord, ImportRow


@dataclass(frozen=True)
class DatasetRuleContext:
    """Directory index plus batch-wide lookups keyed by lower-cased login."""

    directory: DirectoryIndex
    batch: tuple[ImportRow, ...]
    login_counts: Mapping[str, int]
    rows_by_login: Mapping[str, tuple[ImportRow, ...]]


def build_dataset_context(
    batch: Iterable[ImportRow], directory: DirectoryIndex
) -> DatasetRuleContext:
    rows = tuple(batch)
    grouped: dict[str, list[ImportRow]] = {}
    for row in rows:
        grouped.setdefault(row.login_key, []).append(row)
    return DatasetRuleContext(
        directory=directory,
        batch=rows,
        login_counts=MappingProxyType(Counter(row.login_key for row in rows)),
        rows_by_login=MappingProxyType({k: tuple(v) for k, v in grouped.items()}),
    )


def login_duplicated_in_batch(row: ImportRow, ctx: DatasetRuleContext) -> bool:
    """Every occurrence of a repeated login is flagged, not only the second."""
    return ctx.login_counts.get(row.login_key, 0) > 1


def supervisor_invalid(row: ImportRow, ctx: DatasetRuleContext) -> bool:
    """An interviewer must name a supervisor covering all their workspaces.

    The supervisor is looked up among active existing supervisors first,
    then among supervisor rows of the same batch.
    """
    if row.user_role != UserRole.INTERVIEWER:
        return False
    if not row.supervisor:
        return True

    requested = set(row.workspaces)
    supervisor_key = row.supervisor.lower()

    existing = ctx.directory.active_supervisors_by_name.get(supervisor_key)
    if existing is not None:
        return not requested <= existing.workspace_names

    candidates = ctx.rows_by_login.get(supervisor_key, ())
    if not candidates:
        return True
    for candidate in candidates:
        if candidate.user_role == UserRole.SUPERVISOR and requested <= set(candidate.workspaces):
            return False
    return True


def _dataset_rule(
    code: RuleCode,
    field: str,
    check: Callable[[ImportRow, DatasetRuleContext], bool],
    description: str,
) -> ValidationRule[DatasetRuleContext]:
    return ValidationRule(
        code=code, field=field, check=check, scope=RuleScope.DATASET, description=description
    )


DATASET_RULES: tuple[ValidationRule[DatasetRuleContext], ...] = (
    _dataset_rule(
        RuleCode.LOGIN_DUPLICATED,
        "login",
        login_duplicated_in_batch,
        "Login appears more than once in the batch",
    ),
    _dataset_rule(
        RuleCode.SUPERVISOR_INVALID,
        "supervisor",
        supervisor_invalid,
        "Interviewer supervisor is missing or does not cover the workspaces",
    ),
)


def build_dataset_rules(
    existing_users: Iterable[ExistingUserRecord],
    batch: Iterable[ImportRow],
    *,
    directory: DirectoryIndex | None = None,
) -> list[BoundRule]:
    """Bind every dataset rule to the directory and the full batch."""
    if directory is None:
        directory = build_directory_index(existing_users)
    context = build_dataset_context(batch, directory)
    return [rule.bind(context) for rule in DATASET_RULES]
