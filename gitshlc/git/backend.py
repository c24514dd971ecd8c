# -*- coding: utf-8 -*-
"""
GitSHLC Execution Backends

One contract, two environments. The orchestrator only ever calls
`run(program, args, cwd)`; LocalBackend spawns the process directly,
RemoteBackend ships it through ssh with forced non-interactive options.
"""

from dataclasses import replace
from typing import Optional, Protocol, Sequence

from gitshlc.core import log
from gitshlc.core.settings import Settings, get_settings
from gitshlc.git.executor import Step, run_capture
from gitshlc.git.quoting import flatten_command, shell_escape_posix_single

MODE_LOCAL = "local"
MODE_SSH = "ssh"


class ExecutionBackend(Protocol):
    """
    Protocol for running commands against a working tree.

    Attributes:
        mode: "local" or "ssh"
        git_program: git executable to pass as `program` for git commands
    """

    mode: str
    git_program: str

    def run(self, program: str, args: Sequence[str], cwd: Optional[str] = None) -> Step:
        """Run one command, optionally inside a working directory."""
        ...

    def run_with_fallback(
        self,
        program: str,
        primary: Sequence[str],
        fallback: Sequence[str],
        cwd: Optional[str] = None,
    ) -> Step:
        """Run `primary`; backends that support it retry with `fallback`."""
        ...


class LocalBackend:
    """Runs commands on this machine with the working dir as process cwd."""

    mode = MODE_LOCAL

    def __init__(self, git_exe, settings: Optional[Settings] = None):
        """
        Args:
            git_exe: Resolved path to the local git executable
            settings: Settings (process-wide defaults if None)
        """
        self.git_program = str(git_exe)
        self._settings = settings or get_settings()

    def run(self, program, args, cwd=None):
        return run_capture(program, args, cwd, timeout=self._settings.command_timeout)

    def run_with_fallback(self, program, primary, fallback, cwd=None):
        # no detached-HEAD fallback locally; symbolic-ref alone decides
        return self.run(program, primary, cwd)


def ssh_transport_args(ssh_config, settings: Settings):
    """
    Build the forced ssh option list for one remote invocation.

    Args:
        ssh_config: SshConfig (host, user, port, key_path)
        settings: Settings supplying timeout/attempt bounds

    Returns:
        list[str]: Arguments up to and including the `--` separator
    """
    port = ssh_config.port
    if port is None:
        port = settings.default_ssh_port
    args = [
        "-p",
        str(port),
        "-o",
        "BatchMode=yes",
        "-o",
        f"ConnectTimeout={settings.ssh_connect_timeout}",
        "-o",
        f"ConnectionAttempts={settings.ssh_connection_attempts}",
    ]

    key_path = (ssh_config.key_path or "").strip()
    if key_path:
        args.extend(["-i", key_path])

    args.append(f"{ssh_config.user}@{ssh_config.host}")
    args.append("--")
    return args


class RemoteBackend:
    """Runs commands on an ssh host, one transport invocation per command."""

    mode = MODE_SSH

    def __init__(self, ssh_exe, ssh_config, settings: Optional[Settings] = None):
        """
        Args:
            ssh_exe: Resolved path to the local ssh executable
            ssh_config: Validated SshConfig for the target host
            settings: Settings (process-wide defaults if None)
        """
        self._ssh_exe = str(ssh_exe)
        self._ssh = ssh_config
        self._settings = settings or get_settings()
        self.git_program = self._settings.remote_git

    def _exec(self, remote_cmd, cwd):
        args = ssh_transport_args(self._ssh, self._settings) + [remote_cmd]
        step = run_capture(self._ssh_exe, args, None, timeout=self._settings.command_timeout)
        # the transport has no cwd; label the step with the remote directory
        return replace(step, cwd=cwd)

    def run(self, program, args, cwd=None):
        return self._exec(flatten_command(program, args, cwd), cwd)

    def run_with_fallback(self, program, primary, fallback, cwd=None):
        first = flatten_command(program, primary)
        second = flatten_command(program, fallback)
        remote_cmd = f"({first} 2>/dev/null || {second})"
        if cwd is not None:
            remote_cmd = f"cd {shell_escape_posix_single(cwd)} && {remote_cmd}"
        log.debug(f"Remote command with fallback: {remote_cmd}")
        return self._exec(remote_cmd, cwd)
