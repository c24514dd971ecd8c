"""
GitSHLC Action Types

Request/outcome shapes shared by the orchestrator, the initializer and the
connectivity probe. Wire form is camelCase for the GUI layer.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from gitshlc.core.result import ActionError
from gitshlc.git.executor import Step

ACTION_INIT = "init"
ACTION_PULL = "pull"
ACTION_PUSH = "push"
ACTION_MERGE = "merge"

RUN_ACTIONS = (ACTION_PULL, ACTION_PUSH, ACTION_MERGE)


def _text(value) -> str:
    return "" if value is None else str(value)


def _optional_text(value) -> Optional[str]:
    return None if value is None else str(value)


def _parse_port(value) -> Optional[Union[int, str]]:
    # unparseable values are kept as given and rejected at validation
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return text


@dataclass(frozen=True)
class SshConfig:
    """Remote connection descriptor. Not persisted."""

    host: str
    user: str
    port: Optional[Union[int, str]] = None
    key_path: Optional[str] = None

    def has_valid_port(self) -> bool:
        """True when the port is unset (use the default) or a TCP port number."""
        if self.port is None:
            return True
        return isinstance(self.port, int) and 0 < self.port < 65536

    @staticmethod
    def from_dict(data: Optional[dict]) -> SshConfig:
        data = data or {}
        port = _parse_port(data.get("port"))
        return SshConfig(
            host=_text(data.get("host")),
            user=_text(data.get("user")),
            port=port,
            key_path=_optional_text(data.get("keyPath")),
        )


@dataclass(frozen=True)
class RunActionRequest:
    """
    One pull/push/merge request.

    Attributes:
        mode: "local" or "ssh"
        env_key: Opaque caller key echoed back in the outcome
        action: "pull", "push" or "merge"
        local_path: Working tree on this machine (local mode)
        remote_path: Working tree on the ssh host (ssh mode)
        branch: Target branch
        git_path: git executable hint ("" = auto-resolve)
        ssh_path: ssh executable hint ("" = auto-resolve)
        ssh: Remote connection descriptor
        merge_from_branch: Source branch, merge only
        commit_message: Used when a commit has to be synthesized
    """

    mode: str
    env_key: str
    action: str
    local_path: str = ""
    remote_path: str = ""
    branch: str = ""
    git_path: str = ""
    ssh_path: str = ""
    ssh: SshConfig = field(default_factory=lambda: SshConfig(host="", user=""))
    merge_from_branch: Optional[str] = None
    commit_message: Optional[str] = None

    @staticmethod
    def from_dict(data: dict) -> RunActionRequest:
        return RunActionRequest(
            mode=_text(data.get("mode")),
            env_key=_text(data.get("envKey")),
            action=_text(data.get("action")),
            local_path=_text(data.get("localPath")),
            remote_path=_text(data.get("remotePath")),
            branch=_text(data.get("branch")),
            git_path=_text(data.get("gitPath")),
            ssh_path=_text(data.get("sshPath")),
            ssh=SshConfig.from_dict(data.get("ssh")),
            merge_from_branch=_optional_text(data.get("mergeFromBranch")),
            commit_message=_optional_text(data.get("commitMessage")),
        )


@dataclass
class ActionOutcome:
    """
    Result of one orchestration run.

    `ok` is the AND of every step's ok flag, except for early returns, which
    are always failures carrying a specific error.
    """

    ok: bool
    mode: str
    action: str
    env_key: str
    steps: List[Step] = field(default_factory=list)
    error: Optional[ActionError] = None

    def first_failed_step(self) -> Optional[Step]:
        for step in self.steps:
            if not step.ok:
                return step
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "mode": self.mode,
            "action": self.action,
            "envKey": self.env_key,
            "steps": [s.to_dict() for s in self.steps],
            "error": self.error.to_dict() if self.error else None,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass
class ToolCheck:
    """Whether a tool was found and answered a version query."""

    found: bool
    ok: bool
    path: Optional[str] = None
    version: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "found": self.found,
            "path": self.path,
            "version": self.version,
            "ok": self.ok,
            "error": self.error,
        }


@dataclass
class SshConnectResult:
    """
    Connectivity probe result.

    Attributes:
        ok: ssh reachable AND remote git usable ("ready")
        ssh_ok: Liveness phase passed
        stderr: First relevant error text, None when ready
        remote_git: Remote git discovery result
    """

    ok: bool
    ssh_ok: bool
    stderr: Optional[str]
    remote_git: ToolCheck

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "sshOk": self.ssh_ok,
            "stderr": self.stderr,
            "remoteGit": self.remote_git.to_dict(),
        }
