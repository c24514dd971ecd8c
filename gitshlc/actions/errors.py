"""
GitSHLC Error Classifier

Stable (code, severity, message) entries per failure point. Codes are data:
they are looked up where a failure happens and attached to the outcome,
never raised, so the trace collected so far is always returned.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from gitshlc.core.result import ActionError, Severity
from gitshlc.git.backend import MODE_LOCAL, MODE_SSH


class FailurePoint(Enum):
    UNKNOWN_ACTION = "unknown_action"
    UNKNOWN_MODE = "unknown_mode"
    MERGE_SOURCE_MISSING = "merge_source_missing"
    SSH_TARGET_MISSING = "ssh_target_missing"
    REMOTE_PATH_MISSING = "remote_path_missing"
    SSH_PORT_INVALID = "ssh_port_invalid"
    GIT_NOT_FOUND = "git_not_found"
    SSH_NOT_FOUND = "ssh_not_found"
    LOCAL_PATH_MISSING = "local_path_missing"
    LOCAL_PATH_INVALID = "local_path_invalid"
    NOT_A_REPOSITORY = "not_a_repository"
    BRANCH_DETECT_FAILED = "branch_detect_failed"
    STATUS_FAILED = "status_failed"
    DIRTY_ON_OTHER_BRANCH = "dirty_on_other_branch"
    COMMIT_MESSAGE_REQUIRED = "commit_message_required"
    STAGE_FAILED = "stage_failed"
    COMMIT_FAILED = "commit_failed"
    EMPTY_REPO_MESSAGE_REQUIRED = "empty_repo_message_required"
    EMPTY_COMMIT_FAILED = "empty_commit_failed"
    COMMAND_FAILED = "command_failed"
    INIT_PATH_MISSING = "init_path_missing"
    INIT_MKDIR_FAILED = "init_mkdir_failed"
    INIT_ALREADY_DONE = "init_already_done"
    INIT_FAILED = "init_failed"


# point -> {mode: code}, severity, default message
_TABLE = {
    FailurePoint.UNKNOWN_ACTION: (
        {MODE_LOCAL: "CFG-0001", MODE_SSH: "CFG-0001"},
        Severity.ERROR,
        "unknown action",
    ),
    FailurePoint.UNKNOWN_MODE: (
        {MODE_LOCAL: "CFG-0002", MODE_SSH: "CFG-0002"},
        Severity.ERROR,
        "unknown mode (expected local|ssh)",
    ),
    FailurePoint.MERGE_SOURCE_MISSING: (
        {MODE_LOCAL: "CFG-0003", MODE_SSH: "CFG-0201"},
        Severity.ERROR,
        "mergeFromBranch is required for merge",
    ),
    FailurePoint.SSH_TARGET_MISSING: (
        {MODE_SSH: "CFG-0302"},
        Severity.ERROR,
        "ssh host/user is required",
    ),
    FailurePoint.REMOTE_PATH_MISSING: (
        {MODE_SSH: "CFG-0303"},
        Severity.ERROR,
        "remotePath is required",
    ),
    FailurePoint.SSH_PORT_INVALID: (
        {MODE_SSH: "CFG-0304"},
        Severity.ERROR,
        "ssh port must be a number between 1 and 65535",
    ),
    FailurePoint.GIT_NOT_FOUND: (
        {MODE_LOCAL: "GIT-0001"},
        Severity.FATAL,
        "git not found",
    ),
    FailurePoint.SSH_NOT_FOUND: (
        {MODE_SSH: "SSH-0001"},
        Severity.FATAL,
        "ssh not found",
    ),
    FailurePoint.LOCAL_PATH_MISSING: (
        {MODE_LOCAL: "FS-0100"},
        Severity.ERROR,
        "localPath is required",
    ),
    FailurePoint.LOCAL_PATH_INVALID: (
        {MODE_LOCAL: "FS-0101"},
        Severity.ERROR,
        "localPath does not exist",
    ),
    FailurePoint.NOT_A_REPOSITORY: (
        {MODE_LOCAL: "FS-0102"},
        Severity.ERROR,
        "localPath is not a git repository",
    ),
    FailurePoint.BRANCH_DETECT_FAILED: (
        {MODE_LOCAL: "GIT-0100", MODE_SSH: "SSH-0201"},
        Severity.ERROR,
        "failed to get current branch",
    ),
    FailurePoint.STATUS_FAILED: (
        {MODE_LOCAL: "GIT-0101", MODE_SSH: "SSH-0201"},
        Severity.ERROR,
        "git status failed",
    ),
    FailurePoint.DIRTY_ON_OTHER_BRANCH: (
        {MODE_LOCAL: "GIT-0103", MODE_SSH: "GIT-0103"},
        Severity.ERROR,
        "working tree is dirty on a different branch",
    ),
    FailurePoint.COMMIT_MESSAGE_REQUIRED: (
        {MODE_LOCAL: "GIT-0104", MODE_SSH: "GIT-0104"},
        Severity.ERROR,
        "push requires commitMessage when working tree is dirty",
    ),
    FailurePoint.STAGE_FAILED: (
        {MODE_LOCAL: "GIT-0105", MODE_SSH: "SSH-0201"},
        Severity.ERROR,
        "git add failed",
    ),
    FailurePoint.COMMIT_FAILED: (
        {MODE_LOCAL: "GIT-0106", MODE_SSH: "SSH-0201"},
        Severity.ERROR,
        "git commit failed",
    ),
    FailurePoint.EMPTY_REPO_MESSAGE_REQUIRED: (
        {MODE_LOCAL: "GIT-0107", MODE_SSH: "GIT-0107"},
        Severity.ERROR,
        "push requires commitMessage when repository has no commits",
    ),
    FailurePoint.EMPTY_COMMIT_FAILED: (
        {MODE_LOCAL: "GIT-0108", MODE_SSH: "SSH-0201"},
        Severity.ERROR,
        "git commit --allow-empty failed",
    ),
    FailurePoint.COMMAND_FAILED: (
        {MODE_LOCAL: "GIT-0002", MODE_SSH: "SSH-0200"},
        Severity.ERROR,
        "git command failed",
    ),
    FailurePoint.INIT_PATH_MISSING: (
        {MODE_LOCAL: "GIT-0401"},
        Severity.ERROR,
        "localPath is required",
    ),
    FailurePoint.INIT_MKDIR_FAILED: (
        {MODE_LOCAL: "GIT-0402"},
        Severity.ERROR,
        "failed to create directory",
    ),
    FailurePoint.INIT_ALREADY_DONE: (
        {MODE_LOCAL: "GIT-0403"},
        Severity.INFO,
        ".git already exists (already initialized)",
    ),
    FailurePoint.INIT_FAILED: (
        {MODE_LOCAL: "GIT-0499"},
        Severity.ERROR,
        "init failed (see steps)",
    ),
}

# the remote wording differs for the aggregate failure only
_MESSAGE_OVERRIDES = {
    (FailurePoint.COMMAND_FAILED, MODE_SSH): "remote command failed",
}


def code_for(point: FailurePoint, mode: str) -> str:
    """
    Look up the stable code for a failure point.

    Modes outside the table (an unknown mode string) fall back to the
    local column, then to any column.
    """
    codes = _TABLE[point][0]
    if mode in codes:
        return codes[mode]
    if MODE_LOCAL in codes:
        return codes[MODE_LOCAL]
    return next(iter(codes.values()))


def severity_for(point: FailurePoint) -> Severity:
    return _TABLE[point][1]


def classify(
    point: FailurePoint,
    mode: str,
    detail: Optional[str] = None,
    message: Optional[str] = None,
) -> ActionError:
    """
    Build the ActionError for a failure point.

    Args:
        point: Where the run failed
        mode: Execution mode ("local" / "ssh")
        detail: Free text, usually captured stderr or a path
        message: Overrides the default message

    Returns:
        ActionError
    """
    _, severity, default_message = _TABLE[point]
    if message is None:
        message = _MESSAGE_OVERRIDES.get((point, mode), default_message)
    return ActionError(
        code=code_for(point, mode),
        severity=severity,
        message=message,
        detail=detail,
    )
