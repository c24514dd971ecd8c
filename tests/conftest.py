# -*- coding: utf-8 -*-
"""
Pytest configuration and fixtures for GitSHLC tests
"""

import pytest

from gitshlc.actions.types import RunActionRequest, SshConfig
from gitshlc.git.executor import Step


def make_step(cmd="git", ok=True, stdout="", stderr="", exit_code=None, cwd=None):
    """Build a Step with a matching exit code."""
    if exit_code is None:
        exit_code = 0 if ok else 1
    return Step(cmd=cmd, cwd=cwd, ok=ok, exit_code=exit_code, stdout=stdout, stderr=stderr)


class ScriptedBackend:
    """
    Backend stub: records every call and answers from scripted rules.

    Rules map an argument prefix (tuple) to a Step factory kwargs dict.
    The first matching rule wins; unmatched calls succeed with empty output.
    """

    def __init__(self, mode="local", rules=None):
        self.mode = mode
        self.git_program = "git"
        self.rules = list(rules or [])
        self.calls = []
        self.fallback_calls = []

    def on(self, *prefix, **step_kwargs):
        self.rules.append((tuple(prefix), step_kwargs))
        return self

    def _answer(self, program, args, cwd):
        cmd = " ".join([program] + list(args))
        for prefix, kwargs in self.rules:
            if tuple(args[: len(prefix)]) == prefix:
                return make_step(cmd=cmd, cwd=cwd, **kwargs)
        return make_step(cmd=cmd, cwd=cwd)

    def run(self, program, args, cwd=None):
        args = list(args)
        self.calls.append((program, args, cwd))
        return self._answer(program, args, cwd)

    def run_with_fallback(self, program, primary, fallback, cwd=None):
        self.fallback_calls.append((program, list(primary), list(fallback), cwd))
        return self.run(program, primary, cwd)

    @property
    def git_args(self):
        """Argument lists of every call, in order."""
        return [args for _, args, _ in self.calls]


@pytest.fixture
def scripted_backend():
    """Factory for ScriptedBackend instances."""
    return ScriptedBackend


@pytest.fixture
def ssh_config():
    return SshConfig(host="build.example.com", user="deploy", port=2222, key_path="/keys/id_ed25519")


@pytest.fixture
def local_request():
    """Factory for local-mode requests with sensible defaults."""

    def _make(**overrides):
        fields = dict(
            mode="local",
            env_key="dev",
            action="pull",
            local_path="/work/repo",
            branch="main",
        )
        fields.update(overrides)
        return RunActionRequest(**fields)

    return _make


@pytest.fixture
def ssh_request(ssh_config):
    """Factory for ssh-mode requests with sensible defaults."""

    def _make(**overrides):
        fields = dict(
            mode="ssh",
            env_key="prod",
            action="pull",
            remote_path="/srv/app",
            branch="main",
            ssh=ssh_config,
        )
        fields.update(overrides)
        return RunActionRequest(**fields)

    return _make


@pytest.fixture
def fake_repo(tmp_path):
    """A directory that looks like a git working tree (has .git)."""
    repo_path = tmp_path / "repo"
    (repo_path / ".git").mkdir(parents=True)
    return repo_path
