"""Tests for ImportRow normalization and directory records."""

import pytest
from pydantic import ValidationError

from preloadctl.domain.types import UserRole
from preloadctl.domain.users import (
    ExistingUserRecord,
    ImportRow,
    WorkspaceAssignment,
    parse_workspaces,
)


class TestParseWorkspaces:
    def test_splits_and_trims(self) -> None:
        assert parse_workspaces("primary, field-2 ,x") == ("primary", "field-2", "x")

    def test_preserves_order(self) -> None:
        assert parse_workspaces("b,a") == ("b", "a")

    def test_drops_blanks(self) -> None:
        assert parse_workspaces("a,, ,b") == ("a", "b")

    def test_empty(self) -> None:
        assert parse_workspaces("") == ()
        assert parse_workspaces(None) == ()


class TestImportRow:
    def test_none_becomes_empty_string(self) -> None:
        row = ImportRow.model_validate({"login": "jdoe", "email": None, "password": None})
        assert row.email == ""
        assert row.password == ""

    def test_defaults_are_empty(self) -> None:
        row = ImportRow()
        assert row.login == ""
        assert row.user_role is UserRole.UNSET
        assert row.workspaces == ()

    def test_role_parsed_once(self) -> None:
        row = ImportRow(login="a", role="Supervisor")
        assert row.role == "Supervisor"
        assert row.user_role is UserRole.SUPERVISOR

    def test_workspaces_parsed_from_raw_column(self) -> None:
        row = ImportRow(login="a", workspace="W1, W2")
        assert row.workspace == "W1, W2"
        assert row.workspaces == ("W1", "W2")

    def test_derived_fields_follow_raw_columns(self) -> None:
        row = ImportRow.model_validate(
            {"role": "interviewer", "user_role": "supervisor", "workspaces": ["X"]}
        )
        assert row.user_role is UserRole.INTERVIEWER
        assert row.workspaces == ()

    def test_login_key_lowercases(self) -> None:
        assert ImportRow(login="JDoe").login_key == "jdoe"

    def test_frozen(self) -> None:
        row = ImportRow(login="a")
        with pytest.raises(ValidationError):
            row.login = "b"  # type: ignore[misc]

    def test_list_workspace_column_rejected(self) -> None:
        with pytest.raises(ValidationError, match="workspace must be a string"):
            ImportRow.model_validate({"login": "jdoe", "workspace": ["W1"]})

    def test_numeric_role_rejected(self) -> None:
        with pytest.raises(ValidationError, match="role must be a string"):
            ImportRow.model_validate({"login": "jdoe", "role": 1})


class TestExistingUserRecord:
    def test_assignment_for(self) -> None:
        user = ExistingUserRecord(
            user_id="1",
            user_name="ian",
            workspaces=(
                WorkspaceAssignment(workspace_name="W1", supervisor_id="s1"),
                WorkspaceAssignment(workspace_name="W2"),
            ),
        )
        assert user.assignment_for("W1") == WorkspaceAssignment(
            workspace_name="W1", supervisor_id="s1"
        )
        assert user.assignment_for("W2").supervisor_id is None  # type: ignore[union-attr]
        assert user.assignment_for("W3") is None

    def test_workspace_names(self) -> None:
        user = ExistingUserRecord.model_validate(
            {"user_id": "1", "user_name": "a", "workspaces": [{"workspace_name": "W1"}]}
        )
        assert user.workspace_names == frozenset({"W1"})
