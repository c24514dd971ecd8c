# -*- coding: utf-8 -*-
"""
POSIX shell quoting for commands sent over ssh.

The remote side runs whatever string it receives through the user's login
shell, so every argument has to survive exactly one round of sh parsing.
"""

import re

# characters that never need quoting in sh
_SAFE_WORD = re.compile(r"^[A-Za-z0-9_@%+=:,./-]+$")


def shell_escape_posix_single(value):
    """
    Wrap a string in single quotes, escaping embedded single quotes.

    Each ' becomes '\\'' (close quote, escaped quote, reopen quote).

    Args:
        value: Arbitrary string

    Returns:
        str: Single-quoted form that sh reads back as exactly `value`
    """
    return "'" + str(value).replace("'", "'\\''") + "'"


def quote_arg(value):
    """Quote an argument only when sh would otherwise alter it."""
    value = str(value)
    if _SAFE_WORD.match(value):
        return value
    return shell_escape_posix_single(value)


def flatten_command(program, args, cwd=None):
    """
    Flatten a logical command into one remote shell string.

    Args:
        program: Program to run on the remote host
        args: Argument list
        cwd: Optional remote working directory, applied via `cd ... &&`

    Returns:
        str: Command string for the remote shell
    """
    command = " ".join(quote_arg(part) for part in [program] + list(args))
    if cwd is None:
        return command
    return f"cd {shell_escape_posix_single(cwd)} && {command}"
