# -*- coding: utf-8 -*-
"""
GitSHLC Step Executor
Runs one external command and captures it as an immutable Step.
"""

import os
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

from gitshlc.core import log

# exit code used when the process could not be launched or has no status
EXIT_UNAVAILABLE = -1


@dataclass(frozen=True)
class Step:
    """One executed command in an outcome trace."""

    cmd: str
    cwd: Optional[str]
    ok: bool
    exit_code: int
    stdout: str
    stderr: str

    def to_dict(self):
        return {
            "cmd": self.cmd,
            "cwd": self.cwd,
            "ok": self.ok,
            "exitCode": self.exit_code,
            "stdout": self.stdout,
            "stderr": self.stderr,
        }


def format_command(program, args):
    """Render program + args as a single diagnostic string."""
    return " ".join([str(program)] + [str(a) for a in args])


def synthetic_step(cmd, cwd=None, ok=True, stderr=""):
    """
    Build a Step for work done in-process (mkdir, skip markers).

    Args:
        cmd: Label recorded as the command text
        cwd: Optional working directory label
        ok: Success flag
        stderr: Error text for failed synthetic steps

    Returns:
        Step: exit code 0 when ok, otherwise EXIT_UNAVAILABLE
    """
    return Step(
        cmd=cmd,
        cwd=cwd,
        ok=ok,
        exit_code=0 if ok else EXIT_UNAVAILABLE,
        stdout="",
        stderr=stderr,
    )


def _non_interactive_env():
    env = dict(os.environ)
    # auth prompts must fail immediately instead of waiting on a terminal
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


def run_capture(
    program,
    args: Sequence[str],
    cwd: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Step:
    """
    Run a program with stdin closed and terminal prompting disabled.

    Args:
        program: Executable path or name
        args: Argument list (no shell involved)
        cwd: Working directory for this invocation only
        timeout: Optional timeout in seconds (None = wait forever)

    Returns:
        Step: Captured result; launch failures become a failed Step
    """
    cmd_text = format_command(program, args)
    cwd_label = str(cwd) if cwd is not None else None

    try:
        proc = subprocess.run(
            [str(program)] + [str(a) for a in args],
            cwd=cwd_label,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            env=_non_interactive_env(),
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        log.warning(f"Command timed out: {cmd_text}")
        return Step(
            cmd=cmd_text,
            cwd=cwd_label,
            ok=False,
            exit_code=EXIT_UNAVAILABLE,
            stdout="",
            stderr="Command timed out",
        )
    except OSError as e:
        log.error_safe(f"Failed to launch {cmd_text}", e)
        return Step(
            cmd=cmd_text,
            cwd=cwd_label,
            ok=False,
            exit_code=EXIT_UNAVAILABLE,
            stdout="",
            stderr=str(e),
        )

    exit_code = proc.returncode if proc.returncode is not None else EXIT_UNAVAILABLE
    step = Step(
        cmd=cmd_text,
        cwd=cwd_label,
        ok=proc.returncode == 0,
        exit_code=exit_code,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
    )
    log.debug(f"{cmd_text} -> exit {step.exit_code}")
    return step
