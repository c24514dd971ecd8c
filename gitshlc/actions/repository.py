"""
Repository initializer (first-time local setup).
"""

from __future__ import annotations

import os
from typing import Optional

from gitshlc.actions.errors import FailurePoint, classify
from gitshlc.actions.probes import has_git_marker
from gitshlc.actions.types import ACTION_INIT, ActionOutcome
from gitshlc.core import log
from gitshlc.core.settings import Settings, get_settings
from gitshlc.git import tools
from gitshlc.git.backend import MODE_LOCAL, LocalBackend
from gitshlc.git.executor import synthetic_step

INIT_ENV_KEY = "init"


def _outcome(ok, steps, error=None):
    return ActionOutcome(
        ok=ok,
        mode=MODE_LOCAL,
        action=ACTION_INIT,
        env_key=INIT_ENV_KEY,
        steps=steps,
        error=error,
    )


def init_local_repo(
    local_path: str,
    git_path: Optional[str] = None,
    repo_url: Optional[str] = None,
    default_branch: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> ActionOutcome:
    """
    Initialize a local repository; safe to call again.

    Args:
        local_path: Directory to initialize (created if missing)
        git_path: Optional git executable hint
        repo_url: Optional origin URL; added or repointed when given
        default_branch: Branch HEAD should point at (settings default if None)
        settings: Settings (process-wide defaults if None)

    Returns:
        ActionOutcome with action "init"
    """
    settings = settings or get_settings()
    steps = []

    git = tools.git_exe((git_path or "").strip() or None)
    if git is None:
        return _outcome(
            False,
            steps,
            classify(
                FailurePoint.GIT_NOT_FOUND,
                MODE_LOCAL,
                message="git not found. Run preflight and set gitPath if needed.",
            ),
        )

    path = (local_path or "").strip()
    if not path:
        return _outcome(False, steps, classify(FailurePoint.INIT_PATH_MISSING, MODE_LOCAL))

    if not os.path.exists(path):
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            log.error_safe(f"Failed to create {path}", e)
            steps.append(synthetic_step(f"mkdir -p {path}", ok=False, stderr=str(e)))
            return _outcome(
                False, steps, classify(FailurePoint.INIT_MKDIR_FAILED, MODE_LOCAL)
            )
        steps.append(synthetic_step(f"mkdir -p {path}"))

    if has_git_marker(path):
        log.info(f"Repository already initialized: {path}")
        steps.append(synthetic_step(f"[skip] already initialized: {path}", cwd=path))
        return _outcome(
            True, steps, classify(FailurePoint.INIT_ALREADY_DONE, MODE_LOCAL)
        )

    backend = LocalBackend(git, settings)

    def git_step(*args):
        step = backend.run(backend.git_program, list(args), path)
        steps.append(step)
        return step

    git_step("init")

    # symbolic-ref instead of `init -b` / `branch -M`: works on any git version
    branch = (default_branch if default_branch is not None else settings.default_branch)
    branch = branch.strip()
    if branch:
        git_step("symbolic-ref", "HEAD", f"refs/heads/{branch}")

    url = (repo_url or "").strip()
    if url:
        remote = settings.remote_name
        listing = git_step("remote")
        has_origin = listing.ok and any(
            line.strip() == remote for line in listing.stdout.splitlines()
        )
        if has_origin:
            git_step("remote", "set-url", remote, url)
        else:
            git_step("remote", "add", remote, url)

    ok = all(step.ok for step in steps)
    if ok:
        log.info(f"Repository initialized at: {path}")
        return _outcome(True, steps)

    log.error(f"Repository init failed at: {path}")
    return _outcome(False, steps, classify(FailurePoint.INIT_FAILED, MODE_LOCAL))
