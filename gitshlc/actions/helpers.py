"""
Helper utilities for working with actions.
"""

from __future__ import annotations

import os
from typing import Optional, Tuple

from gitshlc.actions.errors import FailurePoint, classify
from gitshlc.actions.probes import has_git_marker
from gitshlc.actions.types import RunActionRequest
from gitshlc.core.result import Result
from gitshlc.core.settings import Settings, get_settings
from gitshlc.git import tools
from gitshlc.git.backend import (
    MODE_LOCAL,
    MODE_SSH,
    ExecutionBackend,
    LocalBackend,
    RemoteBackend,
)

MODES = (MODE_LOCAL, MODE_SSH)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def create_local_backend(
    request: RunActionRequest, settings: Settings
) -> Result[Tuple[ExecutionBackend, str]]:
    """Resolve git and validate the local working tree."""
    mode = MODE_LOCAL
    git = tools.git_exe(_blank_to_none(request.git_path))
    if git is None:
        return Result.failure(classify(FailurePoint.GIT_NOT_FOUND, mode))

    local_path = request.local_path.strip()
    if not local_path:
        return Result.failure(classify(FailurePoint.LOCAL_PATH_MISSING, mode))

    if not os.path.exists(local_path):
        return Result.failure(
            classify(FailurePoint.LOCAL_PATH_INVALID, mode, detail=local_path)
        )
    if not os.path.isdir(local_path):
        return Result.failure(
            classify(
                FailurePoint.LOCAL_PATH_INVALID,
                mode,
                detail=local_path,
                message="localPath is not a directory",
            )
        )
    if not has_git_marker(local_path):
        return Result.failure(
            classify(FailurePoint.NOT_A_REPOSITORY, mode, detail=local_path)
        )

    return Result.success((LocalBackend(git, settings), local_path))


def create_remote_backend(
    request: RunActionRequest, settings: Settings
) -> Result[Tuple[ExecutionBackend, str]]:
    """Resolve ssh and validate the connection descriptor and remote path."""
    mode = MODE_SSH
    ssh = tools.ssh_exe(_blank_to_none(request.ssh_path))
    if ssh is None:
        return Result.failure(classify(FailurePoint.SSH_NOT_FOUND, mode))

    cfg = request.ssh
    if not cfg.host.strip() or not cfg.user.strip():
        return Result.failure(classify(FailurePoint.SSH_TARGET_MISSING, mode))

    if not cfg.has_valid_port():
        return Result.failure(
            classify(FailurePoint.SSH_PORT_INVALID, mode, detail=str(cfg.port))
        )

    remote_path = request.remote_path.strip()
    if not remote_path:
        return Result.failure(classify(FailurePoint.REMOTE_PATH_MISSING, mode))

    return Result.success((RemoteBackend(ssh, cfg, settings), remote_path))


def create_backend(
    request: RunActionRequest, settings: Optional[Settings] = None
) -> Result[Tuple[ExecutionBackend, str]]:
    """
    Pick and build the execution backend for a request.

    Args:
        request: Validated action/mode request
        settings: Settings (process-wide defaults if None)

    Returns:
        Result with (backend, working directory) or the validation error
    """
    settings = settings or get_settings()
    if request.mode == MODE_LOCAL:
        return create_local_backend(request, settings)
    if request.mode == MODE_SSH:
        return create_remote_backend(request, settings)
    return Result.failure(
        classify(FailurePoint.UNKNOWN_MODE, request.mode, detail=request.mode)
    )
