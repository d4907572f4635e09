"""
Shared test fixtures for sftpguard tests.

This module provides common fixtures used across the unit tests:
- An in-memory remote filesystem
- A populated local directory tree
- Isolation from SFTPGUARD_* environment settings
"""

from types import SimpleNamespace

import pytest

from sftpguard.constants import TargetKind
from sftpguard.listeners import SessionEvents
from sftpguard.remote_path import parent_dir


class FakeRemoteFS:
    """In-memory remote filesystem satisfying RemoteFileSystem.

    Records every path passed to exists() so tests can count backend queries.
    """

    def __init__(self, entries=None, cwd="/home/user", path_separator="/"):
        self.entries = dict(entries or {})
        self.cwd = cwd
        self.path_separator = path_separator
        self.sftp = object()
        self.exists_calls = []

    async def exists(self, path):
        self.exists_calls.append(path)
        return self.entries.get(path, TargetKind.NONE)

    async def real_path(self, path):
        if path == ".":
            return self.cwd
        if path == "..":
            return parent_dir(self.cwd, self.path_separator)
        return path


# ============================================================================
# REMOTE FIXTURES
# ============================================================================


@pytest.fixture
def remote_fs():
    """Remote filesystem with a home directory, a file and a subdirectory.

    /home/user          directory (cwd)
    /home/user/data.txt file
    /home/user/uploads  directory
    /home/user/link     symlink
    """
    return FakeRemoteFS(
        {
            "/": TargetKind.DIRECTORY,
            "/home": TargetKind.DIRECTORY,
            "/home/user": TargetKind.DIRECTORY,
            "/home/user/data.txt": TargetKind.FILE,
            "/home/user/uploads": TargetKind.DIRECTORY,
            "/home/user/link": TargetKind.SYMLINK,
        }
    )


@pytest.fixture
def make_remote_fs():
    """Factory for remote filesystems with custom entries."""
    return FakeRemoteFS


@pytest.fixture
def session_client():
    """Minimal client with a live session handle and an event registry."""
    return SimpleNamespace(
        client_name="sftp",
        sftp=object(),
        end_called=False,
        error_handled=False,
        events=SessionEvents(),
    )


# ============================================================================
# LOCAL FIXTURES
# ============================================================================


@pytest.fixture
def local_tree(tmp_path):
    """Local directory tree for validation tests.

    Returns a namespace with:
        root: tmp_path
        file: root/data.txt (regular file)
        dir: root/uploads (directory)
    """
    data = tmp_path / "data.txt"
    data.write_text("# Stat test data")
    uploads = tmp_path / "uploads"
    uploads.mkdir()
    return SimpleNamespace(root=tmp_path, file=data, dir=uploads)


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Keep SFTPGUARD_* settings from the developer's shell out of tests."""
    monkeypatch.delenv("SFTPGUARD_CLIENT_NAME", raising=False)
    monkeypatch.delenv("SFTPGUARD_PATH_SEPARATOR", raising=False)
