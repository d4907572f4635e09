"""Path validation and error normalization for SFTP transfer clients."""

from .config import GuardConfig
from .connection_guard import ensure_connected
from .constants import ErrorKind, OperationKind, TargetKind
from .error_classifier import classify_error
from .error_formatter import format_error, handle_error, retry_suffix
from .exceptions import ConfigError, NormalizedError, SftpGuardError, UnsupportedOperationError
from .listeners import (
    SessionEvents,
    attach_listeners,
    make_close_listener,
    make_end_listener,
    make_error_listener,
    remove_listeners,
)
from .local_path import check_local_path, local_exists, probe_local_access
from .models import ValidationResult
from .remote_path import RemoteFileSystem, check_remote_path, parent_dir, resolve_remote_path
from .sftp_session import SftpSession

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ErrorKind",
    "GuardConfig",
    "NormalizedError",
    "OperationKind",
    "RemoteFileSystem",
    "SessionEvents",
    "SftpGuardError",
    "SftpSession",
    "TargetKind",
    "UnsupportedOperationError",
    "ValidationResult",
    "attach_listeners",
    "check_local_path",
    "check_remote_path",
    "classify_error",
    "ensure_connected",
    "format_error",
    "handle_error",
    "local_exists",
    "make_close_listener",
    "make_end_listener",
    "make_error_listener",
    "parent_dir",
    "probe_local_access",
    "remove_listeners",
    "resolve_remote_path",
    "retry_suffix",
]
