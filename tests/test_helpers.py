# -*- coding: utf-8 -*-
"""
Tests for actions.helpers - backend selection and validation
"""

from unittest.mock import patch

from gitshlc.actions.helpers import create_backend
from gitshlc.actions.types import SshConfig
from gitshlc.core.result import Severity
from gitshlc.core.settings import Settings
from gitshlc.git.backend import LocalBackend, RemoteBackend


@patch("gitshlc.actions.helpers.tools.git_exe", return_value="/usr/bin/git")
class TestLocal:
    """Local mode validation order"""

    def test_valid_repo(self, _mock_git, local_request, fake_repo):
        result = create_backend(local_request(local_path=f"  {fake_repo}  "), Settings())
        assert result.ok
        backend, workdir = result.value
        assert isinstance(backend, LocalBackend)
        assert backend.git_program == "/usr/bin/git"
        assert workdir == str(fake_repo)

    def test_blank_path(self, _mock_git, local_request):
        result = create_backend(local_request(local_path="   "), Settings())
        assert result.error.code == "FS-0100"

    def test_missing_path(self, _mock_git, local_request, tmp_path):
        missing = tmp_path / "gone"
        result = create_backend(local_request(local_path=str(missing)), Settings())
        assert result.error.code == "FS-0101"
        assert result.error.detail == str(missing)

    def test_path_is_a_file(self, _mock_git, local_request, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("x")
        result = create_backend(local_request(local_path=str(target)), Settings())
        assert result.error.code == "FS-0101"
        assert result.error.message == "localPath is not a directory"

    def test_not_a_repository(self, _mock_git, local_request, tmp_path):
        result = create_backend(local_request(local_path=str(tmp_path)), Settings())
        assert result.error.code == "FS-0102"

    def test_git_hint_passed_through(self, mock_git, local_request, fake_repo):
        create_backend(local_request(local_path=str(fake_repo), git_path=" /opt/git "), Settings())
        mock_git.assert_called_once_with("/opt/git")


@patch("gitshlc.actions.helpers.tools.git_exe", return_value=None)
def test_git_missing_is_fatal(_mock_git, local_request, fake_repo):
    result = create_backend(local_request(local_path=str(fake_repo)), Settings())
    assert result.error.code == "GIT-0001"
    assert result.error.severity == Severity.FATAL


@patch("gitshlc.actions.helpers.tools.ssh_exe", return_value="/usr/bin/ssh")
class TestRemote:
    """ssh mode validation order"""

    def test_valid(self, _mock_ssh, ssh_request):
        result = create_backend(ssh_request(remote_path=" /srv/app "), Settings())
        backend, workdir = result.value
        assert isinstance(backend, RemoteBackend)
        assert workdir == "/srv/app"

    def test_missing_user(self, _mock_ssh, ssh_request):
        result = create_backend(ssh_request(ssh=SshConfig(host="h", user=" ")), Settings())
        assert result.error.code == "CFG-0302"

    def test_missing_remote_path(self, _mock_ssh, ssh_request):
        result = create_backend(ssh_request(remote_path=""), Settings())
        assert result.error.code == "CFG-0303"


@patch("gitshlc.actions.helpers.tools.ssh_exe", return_value=None)
def test_ssh_missing_is_fatal(_mock_ssh, ssh_request):
    result = create_backend(ssh_request(), Settings())
    assert result.error.code == "SSH-0001"
    assert result.error.severity == Severity.FATAL


def test_unknown_mode(local_request):
    result = create_backend(local_request(mode="ftp"), Settings())
    assert result.error.code == "CFG-0002"


@patch("gitshlc.actions.helpers.tools.ssh_exe", return_value="/usr/bin/ssh")
def test_port_zero_rejected(_mock_ssh, ssh_request):
    result = create_backend(ssh_request(ssh=SshConfig(host="h", user="u", port=0)), Settings())
    assert result.error.code == "CFG-0304"
    assert result.error.detail == "0"
