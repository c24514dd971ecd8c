# -*- coding: utf-8 -*-
"""
GitSHLC Executable Resolution
Turns a user hint (empty, bare name, file or directory) into a path.
"""

import os
import shutil
import sys
from pathlib import Path

from gitshlc.core import log

GIT_KNOWN_PATHS_WINDOWS = [
    r"C:\Program Files\Git\cmd\git.exe",
    r"C:\Program Files\Git\bin\git.exe",
    r"C:\Program Files (x86)\Git\cmd\git.exe",
    r"C:\Program Files (x86)\Git\bin\git.exe",
]

SSH_KNOWN_PATHS_WINDOWS = [
    r"C:\Windows\System32\OpenSSH\ssh.exe",
]


def _is_windows():
    return sys.platform == "win32"


def looks_like_path(value):
    """True if the hint names a location rather than a bare command."""
    return "/" in value or "\\" in value or ":" in value


def resolve_executable(hint, base_name, known_paths=()):
    """
    Resolve an executable from an optional hint.

    Args:
        hint: Explicit path, directory, bare command name, or empty/None
        base_name: Command name to fall back to (e.g. "git")
        known_paths: Conventional install locations tried before PATH

    Returns:
        str | None: Path to the executable, or None if unresolvable
    """
    hint = (hint or "").strip()
    if hint:
        if looks_like_path(hint):
            candidate = Path(hint)
            if candidate.is_file():
                return str(candidate)
            if candidate.is_dir():
                names = [base_name]
                if _is_windows():
                    names.append(f"{base_name}.exe")
                for name in names:
                    if (candidate / name).is_file():
                        return str(candidate / name)
            log.warning(f"{base_name} hint does not point at an executable: {hint}")
        else:
            found = shutil.which(hint)
            if found:
                return found

    for known in known_paths:
        if os.path.isfile(known):
            return known

    return shutil.which(base_name)


def git_exe(hint=None):
    """Resolve the local git executable."""
    known = GIT_KNOWN_PATHS_WINDOWS if _is_windows() else []
    return resolve_executable(hint, "git", known)


def ssh_exe(hint=None):
    """Resolve the local ssh executable."""
    known = SSH_KNOWN_PATHS_WINDOWS if _is_windows() else []
    return resolve_executable(hint, "ssh", known)
