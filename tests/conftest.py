"""Shared test fixtures for changesets-core."""

import json
from unittest.mock import AsyncMock

import pytest

from _helpers import commit_all, run_git, write_files


@pytest.fixture
def fake_runner():
    """Build a ProcessRunner whose results come from ``handler(args)``.

    Every call is recorded on the returned mock's ``await_args_list``.
    """

    def _build(handler):
        async def _run(command, args, *, cwd):
            assert command == "git"
            return handler(list(args))

        return AsyncMock(side_effect=_run)

    return _build


@pytest.fixture
def git_env(monkeypatch):
    """Isolate git from the host's user config and give it an identity."""
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", "/dev/null")
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    for var in ("GIT_AUTHOR_NAME", "GIT_COMMITTER_NAME"):
        monkeypatch.setenv(var, "Test User")
    for var in ("GIT_AUTHOR_EMAIL", "GIT_COMMITTER_EMAIL"):
        monkeypatch.setenv(var, "test@example.com")


@pytest.fixture
def git_repo(tmp_path, git_env):
    """An initialised repository on branch ``main`` with one commit."""
    repo = tmp_path / "repo"
    repo.mkdir()
    run_git(repo, "init", "-q")
    run_git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    run_git(repo, "config", "commit.gpgsign", "false")
    run_git(repo, "config", "tag.gpgsign", "false")
    write_files(repo, {"package.json": json.dumps({"name": "root", "private": True})})
    commit_all(repo, "initial commit")
    return repo
