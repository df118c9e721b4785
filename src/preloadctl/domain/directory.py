"""Directory index built from the existing-user snapshot.

Built once per validation run, before any rule is bound. All user names
are lower-cased; every lookup made by the rules must lower-case its key.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from preloadctl.domain.users import ExistingUserRecord


@dataclass(frozen=True)
class DirectoryIndex:
    """Read-only lookups over the directory snapshot.

    Attributes:
        active_user_names: Names of users that are not archived.
        archived_supervisor_names: Names of archived supervisors.
        archived_interviewers_by_name: Archived interviewers by name.
            Duplicate names keep the last record seen.
        active_supervisors_by_name: Active supervisors by name.
            Duplicate names keep the last record seen.
        users_by_id: Every record by ``user_id``.
    """

    active_user_names: frozenset[str]
    archived_supervisor_names: frozenset[str]
    archived_interviewers_by_name: Mapping[str, ExistingUserRecord]
    active_supervisors_by_name: Mapping[str, ExistingUserRecord]
    users_by_id: Mapping[str, ExistingUserRecord]


def build_directory_index(existing_users: Iterable[ExistingUserRecord]) -> DirectoryIndex:
    """Index the snapshot. An empty snapshot yields empty structures."""
    active_names: set[str] = set()
    archived_supervisors: set[str] = set()
    archived_interviewers: dict[str, ExistingUserRecord] = {}
    active_supervisors: dict[str, ExistingUserRecord] = {}
    by_id: dict[str, ExistingUserRecord] = {}

    for user in existing_users:
        name = user.user_name.lower()
        by_id[user.user_id] = user
        if not user.is_archived:
            active_names.add(name)
            if user.is_supervisor:
                active_supervisors[name] = user
            continue
        if user.is_supervisor:
            archived_supervisors.add(name)
        if user.is_interviewer:
            archived_interviewers[name] = user

    return DirectoryIndex(
        active_user_names=frozenset(active_names),
        archived_supervisor_names=frozenset(archived_supervisors),
        archived_interviewers_by_name=MappingProxyType(archived_interviewers),
        active_supervisors_by_name=MappingProxyType(active_supervisors),
        users_by_id=MappingProxyType(by_id),
    )
