"""Tests for role parsing and rule codes."""

import pytest

from preloadctl.domain.types import RuleCode, UserRole, parse_role


class TestParseRole:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("interviewer", UserRole.INTERVIEWER),
            ("Interviewer", UserRole.INTERVIEWER),
            ("  SUPERVISOR ", UserRole.SUPERVISOR),
            ("headquarters", UserRole.UNSET),
            ("", UserRole.UNSET),
            (None, UserRole.UNSET),
        ],
    )
    def test_parse(self, raw: str | None, expected: UserRole) -> None:
        assert parse_role(raw) is expected


class TestRuleCode:
    def test_codes_are_stable_strings(self) -> None:
        assert RuleCode.LOGIN_TAKEN == "PLU0001"
        assert RuleCode.WORKSPACE_UNKNOWN == "PLU0022"

    def test_retired_code_absent(self) -> None:
        assert "PLU0006" not in {c.value for c in RuleCode}

    def test_all_codes_unique(self) -> None:
        values = [c.value for c in RuleCode]
        assert len(values) == len(set(values)) == 21
