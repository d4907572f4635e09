"""Remote path validation against a session-based filesystem.

The remote side is reached through any object satisfying RemoteFileSystem;
SftpSession is the paramiko-backed implementation.
"""

import logging
from dataclasses import replace
from typing import Protocol, runtime_checkable

from .constants import ErrorKind, OperationKind, TargetKind
from .error_formatter import format_error
from .models import ValidationResult, coerce_operation

logger = logging.getLogger(__name__)


@runtime_checkable
class RemoteFileSystem(Protocol):
    """Interface a remote filesystem must offer for path validation."""

    path_separator: str

    async def exists(self, path: str) -> "TargetKind | str | None":
        """Get the kind of the object at path; NONE or a falsy value if missing."""
        ...

    async def real_path(self, path: str) -> str:
        """Get the canonical absolute form of path."""
        ...


async def resolve_remote_path(client: RemoteFileSystem, remote_path: str) -> str:
    """Expand a session-relative path to an absolute one.

    "../x" resolves against the real path of "..", "./x" against the real path
    of "."; anything else is returned unchanged.
    """
    sep = client.path_separator
    if remote_path.startswith(".."):
        root = await client.real_path("..")
        remainder = remote_path[3:]
    elif remote_path.startswith("."):
        root = await client.real_path(".")
        remainder = remote_path[2:]
    else:
        return remote_path

    resolved = f"{root.rstrip(sep)}{sep}{remainder}"
    logger.debug(f"Resolved remote path {remote_path} to {resolved}")
    return resolved


def parent_dir(path: str, sep: str = "/") -> str:
    """Get the directory portion of a remote path.

    A trailing separator is ignored, so "/home/user/" gives "/home".
    """
    trimmed = path.rstrip(sep)
    if not trimmed:
        return sep

    head, found, _ = trimmed.rpartition(sep)
    if not found:
        return "."
    return head or sep


async def check_remote_path(
    client: RemoteFileSystem,
    remote_path: str,
    operation: "OperationKind | str" = OperationKind.READ_FILE,
) -> ValidationResult:
    """Validate a remote path for an operation.

    readFile: target must exist and not be a directory
    readDir: target must be a directory
    readObject: target must exist
    writeFile: if target exists, must not be a directory
    writeDir: if target exists, must be a directory
    writeObject: no constraint on an existing target

    A missing write target is reported invalid and its parent directory is
    checked so the caller can decide whether to create it.

    Args:
        client: Remote filesystem to query
        remote_path: Absolute or session-relative ("./", "../") path
        operation: Intended operation

    Returns:
        ValidationResult; an invalid target is a normal result, not an error

    Raises:
        UnsupportedOperationError: Unknown operation kind
        NormalizedError: Empty path, or the remote filesystem failed
    """
    operation = coerce_operation(operation, "check_remote_path")
    if not remote_path:
        raise format_error("Remote path must not be empty", "check_remote_path")

    try:
        result = await _apply_policy(client, remote_path, operation)
    except Exception as e:
        raise format_error(e, "check_remote_path") from e

    logger.debug(f"Remote {operation.value} check of {result.path}: {result.to_dict()}")
    return result


async def _apply_policy(
    client: RemoteFileSystem, remote_path: str, operation: OperationKind
) -> ValidationResult:
    path = await resolve_remote_path(client, remote_path)
    kind = TargetKind.from_code(await client.exists(path))
    missing = kind == TargetKind.NONE

    if operation == OperationKind.READ_OBJECT:
        if missing:
            return _invalid(path, kind, f"No such file: {path}", ErrorKind.NOT_EXIST)

    elif operation == OperationKind.READ_FILE:
        if missing:
            return _invalid(path, kind, f"No such file: {path}", ErrorKind.NOT_EXIST)
        if kind == TargetKind.DIRECTORY:
            return _invalid(path, kind, f"Bad path: {path} must be a file", ErrorKind.BAD_PATH)

    elif operation == OperationKind.READ_DIR:
        if missing:
            return _invalid(path, kind, f"No such directory: {path}", ErrorKind.NOT_DIRECTORY)
        if kind != TargetKind.DIRECTORY:
            return _invalid(
                path, kind, f"Bad path: {path} must be a directory", ErrorKind.BAD_PATH
            )

    elif operation == OperationKind.WRITE_FILE:
        if kind == TargetKind.DIRECTORY:
            return _invalid(
                path, kind, f"Bad path: {path} must be a regular file", ErrorKind.BAD_PATH
            )
        if missing:
            return await _check_parent(
                client, _invalid(path, kind, f"No such file: {path}", ErrorKind.NOT_EXIST)
            )

    elif operation == OperationKind.WRITE_DIR:
        if missing:
            return await _check_parent(
                client,
                _invalid(path, kind, f"No such directory: {path}", ErrorKind.NOT_DIRECTORY),
            )
        if kind != TargetKind.DIRECTORY:
            return _invalid(
                path, kind, f"Bad path: {path} must be a directory", ErrorKind.BAD_PATH
            )

    elif operation == OperationKind.WRITE_OBJECT:
        if missing:
            return await _check_parent(
                client, _invalid(path, kind, f"No such file: {path}", ErrorKind.NOT_EXIST)
            )

    return ValidationResult(path=path, kind=kind)


def _invalid(
    path: str, kind: TargetKind, message: str, error_kind: ErrorKind
) -> ValidationResult:
    return ValidationResult(
        path=path, valid=False, kind=kind, message=message, error_kind=error_kind
    )


async def _check_parent(client: RemoteFileSystem, result: ValidationResult) -> ValidationResult:
    """Check the parent of a missing write target, one level only."""
    parent = parent_dir(result.path, client.path_separator)
    parent_kind = TargetKind.from_code(await client.exists(parent))

    if parent_kind == TargetKind.DIRECTORY:
        return replace(result, parent_valid=True, parent_kind=parent_kind)

    if parent_kind == TargetKind.NONE:
        parent_message = f"No such directory: {parent}"
        parent_error_kind = ErrorKind.NOT_DIRECTORY
    else:
        parent_message = f"Bad path: {parent} must be a directory"
        parent_error_kind = ErrorKind.BAD_PATH

    return replace(
        result,
        parent_valid=False,
        parent_kind=parent_kind,
        parent_message=parent_message,
        parent_error_kind=parent_error_kind,
    )
