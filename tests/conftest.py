"""Shared pytest fixtures for the npminitlib test suite.

Provides:
- A scrubbed environment (no INIT_VERSION / GitHub settings leaking in)
- A recording stand-in for ``run_command``
- A ready-made ProjectSpec rooted in a temporary directory
"""

from __future__ import annotations

from pathlib import Path

import pytest

from npminitlib_cli.catalog import ProjectSpec
from npminitlib_cli.provision import CommandResult

SETTINGS_VARS = ("INIT_VERSION", "GITHUB_ACCESS_TOKEN", "GITHUB_USERNAME")


class FakeRunner:
    """Records every command and answers with a configurable return code.

    ``failures`` maps the first two tokens of a command, e.g. ``("git", "init")``,
    to the return code to report for it.
    """

    def __init__(self, failures: dict[tuple[str, ...], int] | None = None):
        self.failures = failures or {}
        self.calls: list[tuple[list[str], Path, bool]] = []

    def __call__(self, cmd, cwd, stream=False):
        self.calls.append((list(cmd), Path(cwd), stream))
        returncode = self.failures.get(tuple(cmd[:2]), 0)
        return CommandResult(list(cmd), returncode, stderr="boom" if returncode else "")

    @property
    def commands(self) -> list[list[str]]:
        return [cmd for cmd, _, _ in self.calls]

    def ran(self, *prefix: str) -> bool:
        return any(tuple(cmd[: len(prefix)]) == prefix for cmd in self.commands)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove settings variables for the test and restore them afterwards.

    Setting before deleting makes monkeypatch remember the prior state, so
    values written later by ``load_dotenv`` are undone as well.
    """
    for var in SETTINGS_VARS:
        monkeypatch.setenv(var, "placeholder")
        monkeypatch.delenv(var)
    return monkeypatch


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def spec(tmp_path: Path) -> ProjectSpec:
    return ProjectSpec.from_name("foo-lib", version="1.2.3", author="octocat", cwd=tmp_path)


@pytest.fixture
def runner_factory():
    """Build a FakeRunner with failing commands, e.g. ``runner_factory({("git", "init"): 128})``."""
    return FakeRunner
