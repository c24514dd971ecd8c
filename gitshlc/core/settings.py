# -*- coding: utf-8 -*-
"""
GitSHLC Settings Module
Runtime configuration with GITSHLC_* environment overrides.
Nothing is persisted.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from gitshlc.core import log

ENV_PREFIX = "GITSHLC_"


@dataclass(frozen=True)
class Settings:
    """
    Knobs for the orchestrator and backends.

    Attributes:
        remote_name: Remote every action fetches from and pushes to
        ssh_connect_timeout: ConnectTimeout passed to ssh (seconds)
        ssh_connection_attempts: ConnectionAttempts passed to ssh
        default_ssh_port: Port used when SshConfig has none
        default_branch: Branch HEAD points at after init
        command_timeout: Per-process timeout in seconds (None = unbounded)
        remote_git: git program name invoked on the remote host
        ssh_sentinel: Marker echoed by the connectivity liveness check
    """

    remote_name: str = "origin"
    ssh_connect_timeout: int = 5
    ssh_connection_attempts: int = 1
    default_ssh_port: int = 22
    default_branch: str = "main"
    command_timeout: Optional[float] = None
    remote_git: str = "git"
    ssh_sentinel: str = "GITSHLC_SSH_OK"


def _parse_number(name, raw, cast):
    try:
        return cast(raw)
    except (TypeError, ValueError):
        log.warning(f"Ignoring {ENV_PREFIX}{name}={raw!r}: not a number")
        return None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from defaults plus environment overrides.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Settings: Effective settings
    """
    env = os.environ if environ is None else environ
    overrides = {}

    for key, field_name in (
        ("REMOTE_NAME", "remote_name"),
        ("DEFAULT_BRANCH", "default_branch"),
        ("REMOTE_GIT", "remote_git"),
    ):
        value = (env.get(ENV_PREFIX + key) or "").strip()
        if value:
            overrides[field_name] = value

    raw = (env.get(ENV_PREFIX + "SSH_CONNECT_TIMEOUT") or "").strip()
    if raw:
        timeout = _parse_number("SSH_CONNECT_TIMEOUT", raw, int)
        if timeout is not None and timeout > 0:
            overrides["ssh_connect_timeout"] = timeout

    raw = (env.get(ENV_PREFIX + "COMMAND_TIMEOUT") or "").strip()
    if raw:
        timeout = _parse_number("COMMAND_TIMEOUT", raw, float)
        if timeout is not None and timeout > 0:
            overrides["command_timeout"] = timeout

    return replace(Settings(), **overrides)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
