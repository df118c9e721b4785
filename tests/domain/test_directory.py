"""Tests for the directory index builder."""

import pytest

from preloadctl.domain.directory import build_directory_index
from preloadctl.domain.users import ExistingUserRecord


def _user(user_id: str, name: str, **flags: bool) -> ExistingUserRecord:
    return ExistingUserRecord(user_id=user_id, user_name=name, **flags)


class TestBuildDirectoryIndex:
    def test_empty_snapshot(self) -> None:
        index = build_directory_index([])
        assert index.active_user_names == frozenset()
        assert index.archived_supervisor_names == frozenset()
        assert dict(index.archived_interviewers_by_name) == {}
        assert dict(index.active_supervisors_by_name) == {}
        assert dict(index.users_by_id) == {}

    def test_names_lowercased(self) -> None:
        index = build_directory_index([_user("1", "JDoe")])
        assert index.active_user_names == frozenset({"jdoe"})

    def test_partitions_by_archival_and_role(self) -> None:
        users = [
            _user("1", "active_sv", is_supervisor=True),
            _user("2", "old_sv", is_archived=True, is_supervisor=True),
            _user("3", "old_int", is_archived=True, is_interviewer=True),
            _user("4", "active_int", is_interviewer=True),
        ]
        index = build_directory_index(users)
        assert index.active_user_names == frozenset({"active_sv", "active_int"})
        assert index.archived_supervisor_names == frozenset({"old_sv"})
        assert set(index.archived_interviewers_by_name) == {"old_int"}
        assert set(index.active_supervisors_by_name) == {"active_sv"}
        assert set(index.users_by_id) == {"1", "2", "3", "4"}

    def test_archived_names_not_active(self) -> None:
        index = build_directory_index([_user("1", "gone", is_archived=True)])
        assert "gone" not in index.active_user_names

    def test_duplicate_archived_interviewer_last_wins(self) -> None:
        first = _user("1", "ian", is_archived=True, is_interviewer=True)
        second = _user("2", "IAN", is_archived=True, is_interviewer=True)
        index = build_directory_index([first, second])
        assert index.archived_interviewers_by_name["ian"] is second

    def test_mappings_are_read_only(self) -> None:
        index = build_directory_index([_user("1", "a")])
        with pytest.raises(TypeError):
            index.users_by_id["2"] = _user("2", "b")  # type: ignore[index]
