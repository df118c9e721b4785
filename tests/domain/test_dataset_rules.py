"""Tests for the dataset rule catalog."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from preloadctl.domain.dataset_rules import (
    DATASET_RULES,
    DatasetRuleContext,
    build_dataset_context,
    build_dataset_rules,
    login_duplicated_in_batch,
    supervisor_invalid,
)
from preloadctl.domain.directory import build_directory_index
from preloadctl.domain.types import RuleCode, RuleScope
from preloadctl.domain.users import ExistingUserRecord, ImportRow


def _ctx(batch: Iterable[ImportRow], existing: Iterable[dict[str, Any]] = ()) -> DatasetRuleContext:
    records = [ExistingUserRecord.model_validate(u) for u in existing]
    return build_dataset_context(batch, build_directory_index(records))


def _interviewer(login: str = "jdoe", supervisor: str = "boss", workspace: str = "W1") -> ImportRow:
    return ImportRow(login=login, role="interviewer", supervisor=supervisor, workspace=workspace)


ACTIVE_BOSS = {
    "user_id": "sv-1",
    "user_name": "Boss",
    "is_supervisor": True,
    "workspaces": [{"workspace_name": "W1"}, {"workspace_name": "W2"}],
}


class TestCatalog:
    def test_codes(self) -> None:
        assert [r.code for r in DATASET_RULES] == [
            RuleCode.LOGIN_DUPLICATED,
            RuleCode.SUPERVISOR_INVALID,
        ]
        assert {r.scope for r in DATASET_RULES} == {RuleScope.DATASET}

    def test_build_binds_to_batch(self) -> None:
        rows = [ImportRow(login="a"), ImportRow(login="A")]
        bound = build_dataset_rules([], rows)
        duplicate = bound[0]
        assert duplicate.violated(rows[0])
        assert duplicate.violated(rows[1])


class TestLoginDuplicatedInBatch:
    def test_every_occurrence_flagged(self) -> None:
        rows = [ImportRow(login="jdoe"), ImportRow(login="JDoe"), ImportRow(login="other")]
        ctx = _ctx(rows)
        assert [login_duplicated_in_batch(r, ctx) for r in rows] == [True, True, False]

    def test_three_occurrences(self) -> None:
        rows = [ImportRow(login="x")] * 3
        ctx = _ctx(rows)
        assert all(login_duplicated_in_batch(r, ctx) for r in rows)

    def test_unique_logins_pass(self) -> None:
        rows = [ImportRow(login="a"), ImportRow(login="b")]
        ctx = _ctx(rows)
        assert not any(login_duplicated_in_batch(r, ctx) for r in rows)


class TestSupervisorInvalid:
    def test_only_interviewers_checked(self) -> None:
        rows = [
            ImportRow(login="sv", role="supervisor"),
            ImportRow(login="nobody", role=""),
        ]
        ctx = _ctx(rows)
        assert not any(supervisor_invalid(r, ctx) for r in rows)

    def test_empty_supervisor(self) -> None:
        row = _interviewer(supervisor="")
        assert supervisor_invalid(row, _ctx([row], [ACTIVE_BOSS]))

    # --- active existing supervisor ---

    def test_active_supervisor_covering_workspaces(self) -> None:
        row = _interviewer(supervisor="BOSS", workspace="W1,W2")
        assert not supervisor_invalid(row, _ctx([row], [ACTIVE_BOSS]))

    def test_active_supervisor_missing_workspace(self) -> None:
        row = _interviewer(workspace="W1,W3")
        assert supervisor_invalid(row, _ctx([row], [ACTIVE_BOSS]))

    def test_active_supervisor_no_workspaces_requested(self) -> None:
        row = _interviewer(workspace="")
        assert not supervisor_invalid(row, _ctx([row], [ACTIVE_BOSS]))

    def test_archived_supervisor_is_not_active(self) -> None:
        archived = {**ACTIVE_BOSS, "is_archived": True}
        row = _interviewer()
        assert supervisor_invalid(row, _ctx([row], [archived]))

    def test_active_interviewer_is_not_a_supervisor(self) -> None:
        not_a_supervisor = {**ACTIVE_BOSS, "is_supervisor": False, "is_interviewer": True}
        row = _interviewer()
        assert supervisor_invalid(row, _ctx([row], [not_a_supervisor]))

    # --- supervisor from the same batch ---

    def test_dangling_reference(self) -> None:
        row = _interviewer(supervisor="ghost")
        assert supervisor_invalid(row, _ctx([row]))

    def test_batch_supervisor_covering_workspaces(self) -> None:
        sv = ImportRow(login="NewBoss", role="supervisor", workspace="W1,W2")
        row = _interviewer(supervisor="newboss", workspace="W2")
        assert not supervisor_invalid(row, _ctx([row, sv]))

    def test_batch_supervisor_missing_workspace(self) -> None:
        sv = ImportRow(login="newboss", role="supervisor", workspace="W1")
        row = _interviewer(supervisor="newboss", workspace="W1,W2")
        assert supervisor_invalid(row, _ctx([row, sv]))

    def test_batch_row_with_wrong_role(self) -> None:
        sv = ImportRow(login="newboss", role="interviewer", workspace="W1")
        row = _interviewer(supervisor="newboss", workspace="W1")
        assert supervisor_invalid(row, _ctx([row, sv]))

    def test_any_matching_batch_supervisor_suffices(self) -> None:
        rows = [
            ImportRow(login="newboss", role="interviewer", workspace="W1"),
            ImportRow(login="newboss", role="supervisor", workspace="W1"),
        ]
        row = _interviewer(supervisor="newboss", workspace="W1")
        assert not supervisor_invalid(row, _ctx([row, *rows]))

    def test_duplicate_workspace_names_do_not_matter(self) -> None:
        sv = ImportRow(login="newboss", role="supervisor", workspace="W1")
        row = _interviewer(supervisor="newboss", workspace="W1, W1")
        assert not supervisor_invalid(row, _ctx([row, sv]))
