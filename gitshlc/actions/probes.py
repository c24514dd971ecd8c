"""
Precondition probes: read-only checks built from single backend calls.
"""

from __future__ import annotations

import os
from typing import Optional, Tuple

from gitshlc.git.backend import ExecutionBackend
from gitshlc.git.executor import Step

GIT_MARKER = ".git"


def has_git_marker(path) -> bool:
    """True if `path` holds git metadata (a .git dir, or a .git file for worktrees)."""
    return os.path.exists(os.path.join(str(path), GIT_MARKER))


def current_branch(backend: ExecutionBackend, workdir: str) -> Tuple[Step, Optional[str]]:
    """
    Detect the checked-out branch.

    `symbolic-ref --short HEAD` works on an unborn branch. Backends that
    support it fall back to `rev-parse --abbrev-ref HEAD` for detached HEAD.

    Returns:
        (step, branch) where branch is None if the step failed
    """
    step = backend.run_with_fallback(
        backend.git_program,
        ["symbolic-ref", "--short", "HEAD"],
        ["rev-parse", "--abbrev-ref", "HEAD"],
        workdir,
    )
    if not step.ok:
        return step, None
    return step, step.stdout.strip()


def head_exists(backend: ExecutionBackend, workdir: str) -> Step:
    """Check that HEAD resolves to a commit. step.ok == "has commits"."""
    return backend.run(backend.git_program, ["rev-parse", "--verify", "HEAD"], workdir)


def status_clean(backend: ExecutionBackend, workdir: str) -> Tuple[Step, Optional[bool]]:
    """
    Porcelain status, ignoring submodule noise.

    Returns:
        (step, clean) where clean is None if status could not run
    """
    step = backend.run(
        backend.git_program,
        ["status", "--porcelain", "--ignore-submodules"],
        workdir,
    )
    if not step.ok:
        return step, None
    return step, not step.stdout.strip()
