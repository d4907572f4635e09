"""Remote filesystem backed by a paramiko SFTP channel.

SftpSession wraps an SFTP channel the caller has already opened and exposes
the operations remote path validation needs. Opening and re-opening
connections is left to the caller.

Example:
    >>> ssh = paramiko.SSHClient()
    >>> ssh.connect(hostname="10.0.0.1", username="user", key_filename="/key")
    >>> session = SftpSession(ssh.open_sftp())
    >>> result = await check_remote_path(session, "./data.csv", OperationKind.READ_FILE)
"""

import asyncio
import logging
import stat

import paramiko

from .config import GuardConfig
from .connection_guard import ensure_connected
from .constants import TargetKind
from .error_formatter import handle_error
from .listeners import CLOSE, END, SessionEvents

logger = logging.getLogger(__name__)


class SftpSession:
    """Session-based remote filesystem.

    Attributes:
        sftp: Open paramiko SFTP channel, None once the session has closed
        client_name: Name used in log and error messages
        path_separator: Remote path separator
        end_called: Set when the session was ended on purpose
        error_handled: Set by the error listener once an error was passed on
        events: Registry for "error", "end" and "close" observers
    """

    def __init__(self, sftp: paramiko.SFTPClient | None, config: GuardConfig | None = None):
        config = config or GuardConfig()
        self.sftp = sftp
        self.client_name = config.client_name
        self.path_separator = config.path_separator
        self.end_called = False
        self.error_handled = False
        self.events = SessionEvents()

    async def exists(self, path: str) -> TargetKind:
        """Get the kind of the remote object at path.

        Symlinks are reported as such, not followed. Objects that are neither
        directories nor symlinks count as files.

        Raises:
            NormalizedError: No session, or the stat failed for a reason other
                than a missing path
        """
        ensure_connected(self, "exists")
        try:
            attrs = await asyncio.to_thread(self.sftp.lstat, path)
        except FileNotFoundError:
            return TargetKind.NONE
        except (OSError, paramiko.SSHException) as e:
            handle_error(e, "exists")

        mode = attrs.st_mode or 0
        if stat.S_ISDIR(mode):
            return TargetKind.DIRECTORY
        if stat.S_ISLNK(mode):
            return TargetKind.SYMLINK
        return TargetKind.FILE

    async def real_path(self, path: str) -> str:
        """Get the canonical absolute form of a remote path.

        Raises:
            NormalizedError: No session, or the server could not resolve path
        """
        ensure_connected(self, "realPath")
        try:
            return await asyncio.to_thread(self.sftp.normalize, path)
        except (OSError, paramiko.SSHException) as e:
            handle_error(e, "realPath")

    async def end(self) -> None:
        """Close the SFTP channel and notify end and close observers."""
        self.end_called = True
        sftp, self.sftp = self.sftp, None
        if sftp is not None:
            await asyncio.to_thread(sftp.close)
        logger.debug(f"{self.client_name}: session ended")
        self.events.emit(END)
        self.events.emit(CLOSE)
