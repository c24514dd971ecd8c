# -*- coding: utf-8 -*-
"""
Tests for actions.connectivity - ssh liveness and remote git discovery
"""

from unittest.mock import patch

from gitshlc.actions.connectivity import (
    REMOTE_GIT_DISCOVERY_SCRIPT,
    detect_remote_git,
    ssh_connect,
)
from gitshlc.actions.types import SshConfig
from gitshlc.core.settings import Settings


def _ssh_backend(scripted_backend):
    return scripted_backend(mode="ssh")


class TestSshConnect:
    """End-to-end probe through a scripted remote"""

    def test_ready(self, scripted_backend, ssh_config):
        backend = (
            _ssh_backend(scripted_backend)
            .on("GITSHLC_SSH_OK", stdout="GITSHLC_SSH_OK\n")
            .on("-c", stdout="/usr/bin/git\n")
            .on("--version", stdout="git version 2.43.0\n")
        )

        result = ssh_connect(None, ssh_config, Settings(), backend=backend)

        assert result.ok is True
        assert result.ssh_ok is True
        assert result.stderr is None
        assert result.remote_git.path == "/usr/bin/git"
        assert result.remote_git.version == "git version 2.43.0"
        assert backend.calls[0] == ("echo", ["GITSHLC_SSH_OK"], None)
        assert backend.calls[1] == ("sh", ["-c", REMOTE_GIT_DISCOVERY_SCRIPT], None)
        assert backend.calls[2] == ("/usr/bin/git", ["--version"], None)

    def test_unreachable(self, scripted_backend, ssh_config):
        backend = _ssh_backend(scripted_backend).on(
            "GITSHLC_SSH_OK", ok=False, exit_code=255, stderr="Permission denied (publickey)."
        )

        result = ssh_connect(None, ssh_config, Settings(), backend=backend)

        assert result.ok is False
        assert result.ssh_ok is False
        assert result.stderr == "Permission denied (publickey)."
        assert result.remote_git.error == "remote git not checked"
        assert len(backend.calls) == 1

    def test_sentinel_missing_from_output(self, scripted_backend, ssh_config):
        backend = _ssh_backend(scripted_backend).on("GITSHLC_SSH_OK", stdout="motd only\n")

        result = ssh_connect(None, ssh_config, Settings(), backend=backend)

        assert result.ssh_ok is False
        assert result.stderr == "motd only\n"

    def test_reachable_without_git(self, scripted_backend, ssh_config):
        backend = (
            _ssh_backend(scripted_backend)
            .on("GITSHLC_SSH_OK", stdout="GITSHLC_SSH_OK\n")
            .on("-c", stdout="\n")
        )

        result = ssh_connect(None, ssh_config, Settings(), backend=backend)

        assert result.ok is False
        assert result.ssh_ok is True
        assert result.remote_git.found is False
        assert "git not found on remote" in result.stderr

    def test_missing_host(self, scripted_backend):
        backend = _ssh_backend(scripted_backend)
        result = ssh_connect(None, SshConfig(host="", user="deploy"), Settings(), backend=backend)
        assert result.stderr == "host/user is required"
        assert backend.calls == []

    @patch("gitshlc.actions.connectivity.tools.ssh_exe", return_value=None)
    def test_ssh_missing(self, _mock_ssh, ssh_config):
        result = ssh_connect("", ssh_config, Settings())
        assert result.ok is False
        assert result.stderr == "ssh not found. preflight required"

    def test_serialization(self, scripted_backend, ssh_config):
        backend = _ssh_backend(scripted_backend).on("GITSHLC_SSH_OK", ok=False, stderr="timeout")
        data = ssh_connect(None, ssh_config, Settings(), backend=backend).to_dict()
        assert data["sshOk"] is False
        assert data["remoteGit"]["found"] is False


class TestDetectRemoteGit:
    def test_version_failure(self, scripted_backend):
        backend = (
            _ssh_backend(scripted_backend)
            .on("-c", stdout="/usr/local/bin/git\n")
            .on("--version", ok=False, stderr="", stdout="segfault")
        )

        check = detect_remote_git(backend)

        assert check.found is True
        assert check.ok is False
        assert check.path == "/usr/local/bin/git"
        assert check.error == "segfault"

    def test_discovery_failure(self, scripted_backend):
        backend = _ssh_backend(scripted_backend).on("-c", ok=False, stderr="sh: not found")
        check = detect_remote_git(backend)
        assert check.found is False
        assert check.error == "sh: not found"


def test_invalid_port_stops_before_any_command(scripted_backend):
    backend = scripted_backend(mode="ssh")
    cfg = SshConfig(host="h", user="u", port="twenty-two")

    result = ssh_connect(None, cfg, Settings(), backend=backend)

    assert result.ok is False
    assert result.stderr == "invalid ssh port: twenty-two"
    assert backend.calls == []
