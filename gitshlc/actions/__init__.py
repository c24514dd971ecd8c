"""
GitSHLC Actions Module

Request/outcome orchestration for git workflows.
No Qt/UI dependencies - only business logic.

Each action:
- Takes a request (or plain arguments)
- Returns a structured result with the ordered step trace
- Is testable with a scripted backend
"""

from gitshlc.actions.types import (
    ActionOutcome,
    RunActionRequest,
    SshConfig,
    SshConnectResult,
    ToolCheck,
)
from gitshlc.actions.orchestrator import run_action
from gitshlc.actions.repository import init_local_repo
from gitshlc.actions.connectivity import ssh_connect
from gitshlc.git.branches import list_branches

__all__ = [
    "ActionOutcome",
    "RunActionRequest",
    "SshConfig",
    "SshConnectResult",
    "ToolCheck",
    "run_action",
    "init_local_repo",
    "ssh_connect",
    "list_branches",
]
