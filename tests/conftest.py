"""Shared pytest fixtures for preloadctl tests."""

from __future__ import annotations

import json
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from preloadctl.domain.policy import ImportPolicy, default_policy
from preloadctl.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """Telemetry is a ContextVar; never let one test leak it into the next."""
    yield
    disable_telemetry()


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PRELOADCTL_CONFIG", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def policy() -> ImportPolicy:
    """Import policy built from code defaults."""
    return default_policy()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Change CWD to an empty temp directory so no stray config is discovered."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_batch(tmp_path: Path) -> Callable[..., Path]:
    """Write a batch document to ``tmp_path`` and return its path."""

    def _write(
        users: list[dict[str, Any]],
        *,
        existing_users: list[dict[str, Any]] | None = None,
        workspaces: list[str] | None = None,
        name: str = "batch.json",
    ) -> Path:
        path = tmp_path / name
        payload = {
            "workspaces": workspaces if workspaces is not None else ["primary"],
            "existing_users": existing_users or [],
            "users": users,
        }
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Canonical records
# ---------------------------------------------------------------------------

VALID_PASSWORD = "Secr3t!x"


@pytest.fixture
def boss_record() -> dict[str, Any]:
    """Active supervisor ``boss`` assigned to ``primary``."""
    return {
        "user_id": "sv-1",
        "user_name": "boss",
        "is_supervisor": True,
        "workspaces": [{"workspace_name": "primary"}],
    }


@pytest.fixture
def valid_interviewer() -> dict[str, Any]:
    """Interviewer row that passes every rule when ``boss`` exists."""
    return {
        "login": "jdoe",
        "password": VALID_PASSWORD,
        "email": "jdoe@example.org",
        "full_name": "John Doe",
        "phone_number": "555-123-4567",
        "role": "interviewer",
        "supervisor": "boss",
        "workspace": "primary",
    }
