# -*- coding: utf-8 -*-
"""
GitSHLC Remote Branch Listing
"""

from dataclasses import dataclass, field
from typing import List, Optional

from gitshlc.core import log
from gitshlc.core.settings import get_settings
from gitshlc.git.executor import run_capture
from gitshlc.git.tools import git_exe

_HEADS_PREFIX = "refs/heads/"


@dataclass
class BranchList:
    """Branches advertised by a remote."""

    ok: bool
    branches: List[str] = field(default_factory=list)
    stderr: Optional[str] = None

    def to_dict(self):
        return {"ok": self.ok, "branches": list(self.branches), "stderr": self.stderr}


def parse_remote_heads(text):
    """
    Parse `git ls-remote --heads` output into branch names.

    Lines look like `<sha>\\trefs/heads/<branch>`. Anything outside
    refs/heads is ignored; the result is deduplicated and sorted.

    Args:
        text: Raw stdout

    Returns:
        list[str]: Sorted unique branch names
    """
    names = set()
    for line in (text or "").splitlines():
        if "\t" not in line:
            continue
        ref = line.split("\t", 1)[1]
        if not ref.startswith(_HEADS_PREFIX):
            continue
        name = ref[len(_HEADS_PREFIX):].strip()
        if name:
            names.add(name)
    return sorted(names)


def list_branches(repo_url, git_path=None):
    """
    List branch heads of a remote repository URL.

    Args:
        repo_url: Remote URL (anything git ls-remote accepts)
        git_path: Optional git executable hint

    Returns:
        BranchList
    """
    git = git_exe(git_path)
    if git is None:
        return BranchList(ok=False, stderr="git not found")

    step = run_capture(
        git,
        ["ls-remote", "--heads", repo_url],
        timeout=get_settings().command_timeout,
    )
    if not step.ok:
        message = step.stderr if step.stderr.strip() else step.stdout
        log.warning(f"ls-remote failed for {repo_url}: {message.strip()}")
        return BranchList(ok=False, stderr=message)

    branches = parse_remote_heads(step.stdout)
    log.debug(f"{len(branches)} branch(es) on {repo_url}")
    return BranchList(ok=True, branches=branches)
