"""
Remote connectivity probe: ssh liveness, then remote git discovery.
"""

from __future__ import annotations

from typing import Optional

from gitshlc.actions.types import SshConfig, SshConnectResult, ToolCheck
from gitshlc.core import log
from gitshlc.core.settings import Settings, get_settings
from gitshlc.git import tools
from gitshlc.git.backend import RemoteBackend

# non-interactive shells often have a thin PATH; try conventional spots too
REMOTE_GIT_DISCOVERY_SCRIPT = (
    "if command -v git >/dev/null 2>&1; then command -v git; "
    "elif [ -x /usr/bin/git ]; then echo /usr/bin/git; "
    "elif [ -x /usr/local/bin/git ]; then echo /usr/local/bin/git; "
    "elif [ -x /bin/git ]; then echo /bin/git; "
    "else echo; fi"
)

_NOT_CHECKED = "remote git not checked"


def _not_checked():
    return ToolCheck(found=False, ok=False, error=_NOT_CHECKED)


def _message(step):
    return step.stderr if step.stderr.strip() else step.stdout


def detect_remote_git(backend: RemoteBackend) -> ToolCheck:
    """
    Locate git on the remote host and query its version.

    Args:
        backend: RemoteBackend for the host

    Returns:
        ToolCheck
    """
    find = backend.run("sh", ["-c", REMOTE_GIT_DISCOVERY_SCRIPT])
    if not find.ok:
        return ToolCheck(found=False, ok=False, error=_message(find))

    lines = find.stdout.splitlines()
    path = lines[0].strip() if lines else ""
    if not path:
        return ToolCheck(
            found=False,
            ok=False,
            error="git not found on remote (PATH or standard locations)",
        )

    version = backend.run(path, ["--version"])
    if not version.ok:
        return ToolCheck(found=True, ok=False, path=path, error=_message(version))

    return ToolCheck(
        found=True, ok=True, path=path, version=version.stdout.strip()
    )


def ssh_connect(
    ssh_path: Optional[str],
    ssh: SshConfig,
    settings: Optional[Settings] = None,
    backend: Optional[RemoteBackend] = None,
) -> SshConnectResult:
    """
    Validate a remote configuration before it is used for actions.

    Args:
        ssh_path: ssh executable hint
        ssh: Connection descriptor
        settings: Settings (process-wide defaults if None)
        backend: Pre-built backend (resolved from ssh_path if None)

    Returns:
        SshConnectResult: ok only when both phases pass
    """
    settings = settings or get_settings()

    if backend is None:
        ssh_exe = tools.ssh_exe((ssh_path or "").strip() or None)
        if ssh_exe is None:
            return SshConnectResult(
                ok=False,
                ssh_ok=False,
                stderr="ssh not found. preflight required",
                remote_git=_not_checked(),
            )
        backend = RemoteBackend(ssh_exe, ssh, settings)

    if not ssh.host.strip() or not ssh.user.strip():
        return SshConnectResult(
            ok=False,
            ssh_ok=False,
            stderr="host/user is required",
            remote_git=_not_checked(),
        )

    if not ssh.has_valid_port():
        return SshConnectResult(
            ok=False,
            ssh_ok=False,
            stderr=f"invalid ssh port: {ssh.port}",
            remote_git=_not_checked(),
        )

    ping = backend.run("echo", [settings.ssh_sentinel])
    ssh_ok = ping.ok and settings.ssh_sentinel in ping.stdout
    if not ssh_ok:
        log.warning(f"ssh liveness failed for {ssh.user}@{ssh.host}")
        return SshConnectResult(
            ok=False, ssh_ok=False, stderr=_message(ping), remote_git=_not_checked()
        )

    remote_git = detect_remote_git(backend)
    ok = remote_git.ok
    if ok:
        log.info(f"{ssh.user}@{ssh.host} ready: {remote_git.version}")
    else:
        log.warning(f"{ssh.user}@{ssh.host} reachable, remote git unusable: {remote_git.error}")

    return SshConnectResult(
        ok=ok,
        ssh_ok=True,
        stderr=None if ok else remote_git.error,
        remote_git=remote_git,
    )
