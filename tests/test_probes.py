# -*- coding: utf-8 -*-
"""
Tests for actions.probes - read-only precondition checks
"""

from gitshlc.actions import probes


class TestHasGitMarker:
    def test_directory_marker(self, fake_repo):
        assert probes.has_git_marker(fake_repo)

    def test_file_marker_for_worktrees(self, tmp_path):
        (tmp_path / ".git").write_text("gitdir: /elsewhere/.git/worktrees/x\n")
        assert probes.has_git_marker(str(tmp_path))

    def test_missing(self, tmp_path):
        assert not probes.has_git_marker(tmp_path)


class TestCurrentBranch:
    def test_strips_output(self, scripted_backend):
        backend = scripted_backend().on("symbolic-ref", stdout="feature/x\n")
        step, branch = probes.current_branch(backend, "/r")
        assert step.ok
        assert branch == "feature/x"
        assert backend.fallback_calls == [
            ("git", ["symbolic-ref", "--short", "HEAD"], ["rev-parse", "--abbrev-ref", "HEAD"], "/r")
        ]

    def test_failure(self, scripted_backend):
        backend = scripted_backend().on("symbolic-ref", ok=False, stderr="fatal: not a git repository")
        step, branch = probes.current_branch(backend, "/r")
        assert not step.ok
        assert branch is None


class TestHeadExists:
    def test_command(self, scripted_backend):
        backend = scripted_backend()
        assert probes.head_exists(backend, "/r").ok
        assert backend.git_args == [["rev-parse", "--verify", "HEAD"]]

    def test_unborn(self, scripted_backend):
        backend = scripted_backend().on("rev-parse", ok=False, exit_code=128)
        assert not probes.head_exists(backend, "/r").ok


class TestStatusClean:
    def test_clean(self, scripted_backend):
        backend = scripted_backend().on("status", stdout="\n")
        _, clean = probes.status_clean(backend, "/r")
        assert clean is True
        assert backend.git_args == [["status", "--porcelain", "--ignore-submodules"]]

    def test_dirty(self, scripted_backend):
        backend = scripted_backend().on("status", stdout=" M a.txt\n?? b.txt\n")
        assert probes.status_clean(backend, "/r")[1] is False

    def test_failed(self, scripted_backend):
        backend = scripted_backend().on("status", ok=False)
        assert probes.status_clean(backend, "/r")[1] is None
