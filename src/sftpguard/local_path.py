"""Local filesystem path validation.

Two steps: an access probe that checks existence and permissions for the
intended operation (including the parent directory of a target that is yet to
be created), then a kind check that the target is a file or directory as the
operation demands.

Permission checks use os.access, so they answer for the real uid/gid of the
process.
"""

import asyncio
import errno
import logging
import os
import stat
from dataclasses import replace

from .constants import ErrorKind, OperationKind, TargetKind
from .error_classifier import classify_error
from .error_formatter import format_error
from .exceptions import NormalizedError
from .models import ValidationResult, coerce_operation

logger = logging.getLogger(__name__)

_ACCESS_MODES: dict[OperationKind, int] = {
    OperationKind.READ_FILE: os.R_OK,
    OperationKind.READ_DIR: os.R_OK | os.X_OK,
    OperationKind.READ_OBJECT: os.R_OK,
    OperationKind.WRITE_FILE: os.W_OK,
    OperationKind.WRITE_DIR: os.W_OK,
    OperationKind.WRITE_OBJECT: os.W_OK,
}

# Operation -> (required kind, requirement named in the message)
_KIND_RULES: dict[OperationKind, tuple[TargetKind, str]] = {
    OperationKind.READ_FILE: (TargetKind.FILE, "must be a regular file"),
    OperationKind.READ_DIR: (TargetKind.DIRECTORY, "must be a directory"),
    OperationKind.WRITE_DIR: (TargetKind.DIRECTORY, "must be a directory"),
}


def local_exists(path: str) -> TargetKind:
    """Get the kind of a local filesystem object.

    Symlinks are followed; a symlink whose target is missing reports SYMLINK.
    Objects that are neither regular files nor directories report NONE.

    Raises:
        OSError: stat failed for a reason other than a missing path
    """
    try:
        st = os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return TargetKind.SYMLINK if os.path.islink(path) else TargetKind.NONE

    if stat.S_ISDIR(st.st_mode):
        return TargetKind.DIRECTORY
    if stat.S_ISREG(st.st_mode):
        return TargetKind.FILE
    return TargetKind.NONE


def _normalize(path: str) -> str:
    """Absolute, normalized path; a trailing separator survives."""
    target = os.path.abspath(path)
    if path.endswith(os.sep) and not target.endswith(os.sep):
        target += os.sep
    return target


def _parent(path: str) -> str:
    return os.path.dirname(path.rstrip(os.sep)) or os.sep


def _check_access(path: str, mode: int) -> None:
    """Raise the OSError explaining why path is not accessible with mode."""
    # os.access only answers yes/no; stat first to learn a missing path apart
    # from a refused one.
    os.stat(path)
    if not os.access(path, mode):
        raise PermissionError(errno.EACCES, os.strerror(errno.EACCES), path)


async def probe_local_access(
    path: str, operation: "OperationKind | str"
) -> ValidationResult:
    """Check existence and permissions of a local path for an operation.

    Kind is not checked here; see check_local_path.

    Args:
        path: Local path, relative paths resolve against the working directory.
            A trailing separator is kept, so it only matches a directory.
        operation: Intended operation

    Returns:
        ValidationResult. For write operations on a missing target the parent
        directory is probed for write permission as well.

    Raises:
        UnsupportedOperationError: Unknown operation kind
    """
    operation = coerce_operation(operation, "probe_local_access")
    target = _normalize(path)

    try:
        await asyncio.to_thread(_check_access, target, _ACCESS_MODES[operation])
    except OSError as e:
        message, error_kind = classify_error(e, target)
    else:
        return ValidationResult(path=target)

    if not (operation.is_write and error_kind == ErrorKind.NOT_EXIST):
        return ValidationResult(path=target, valid=False, message=message, error_kind=error_kind)

    parent = _parent(target)
    try:
        await asyncio.to_thread(_check_access, parent, os.W_OK)
    except OSError as e:
        parent_message, parent_error_kind = classify_error(e, parent)
        return ValidationResult(
            path=target,
            valid=False,
            message=message,
            error_kind=error_kind,
            parent_valid=False,
            parent_message=parent_message,
            parent_error_kind=parent_error_kind,
        )

    return ValidationResult(
        path=target,
        valid=False,
        message=message,
        error_kind=error_kind,
        parent_valid=True,
    )


async def check_local_path(
    path: str, operation: "OperationKind | str" = OperationKind.READ_FILE
) -> ValidationResult:
    """Validate a local path for an operation.

    readFile: target must be a readable regular file
    readDir: target must be a readable, searchable directory
    readObject: target must exist and be readable
    writeFile: if target exists, must be writable and not a directory
    writeDir: if target exists, must be a writable directory
    writeObject: if target exists, must be writable

    When a write target does not exist, its parent must be a directory the
    target can be created in.

    Args:
        path: Local path to check
        operation: Intended operation

    Returns:
        ValidationResult; an invalid target is a normal result, not an error

    Raises:
        UnsupportedOperationError: Unknown operation kind
        NormalizedError: The filesystem failed unexpectedly
    """
    operation = coerce_operation(operation, "check_local_path")

    try:
        result = await probe_local_access(path, operation)
        if result.valid:
            result = await _check_kind(result, operation)
        elif operation.is_write and result.error_kind in (
            ErrorKind.NOT_EXIST,
            ErrorKind.NOT_DIRECTORY,
        ):
            result = await _check_parent_kind(result)
    except (NormalizedError, OSError) as e:
        raise format_error(e, "check_local_path") from e

    logger.debug(f"Local {operation.value} check of {result.path}: {result.to_dict()}")
    return result


async def _check_kind(result: ValidationResult, operation: OperationKind) -> ValidationResult:
    kind = await asyncio.to_thread(local_exists, result.path)

    if operation == OperationKind.WRITE_FILE and kind == TargetKind.DIRECTORY:
        return _bad_path(result, kind, "must be a file")

    rule = _KIND_RULES.get(operation)
    if rule is not None and kind != rule[0]:
        return _bad_path(result, kind, rule[1])

    # Devices, FIFOs and sockets
    if kind == TargetKind.NONE:
        return _bad_path(result, kind, "must be a regular file or directory")

    return replace(result, kind=kind)


def _bad_path(result: ValidationResult, kind: TargetKind, requirement: str) -> ValidationResult:
    return replace(
        result,
        valid=False,
        kind=kind,
        message=f"Bad path: {result.path} {requirement}",
        error_kind=ErrorKind.BAD_PATH,
    )


async def _check_parent_kind(result: ValidationResult) -> ValidationResult:
    """Confirm the parent of a missing write target is a directory.

    The parent's kind outranks the permission probe: a parent that exists but
    is not a directory always makes the parent invalid.
    """
    parent = _parent(result.path)
    parent_kind = await asyncio.to_thread(local_exists, parent)

    if parent_kind == TargetKind.DIRECTORY:
        return replace(result, parent_kind=parent_kind)

    if parent_kind == TargetKind.NONE:
        if result.parent_valid is False:
            return replace(result, parent_kind=parent_kind)
        return replace(
            result,
            parent_valid=False,
            parent_kind=parent_kind,
            parent_message=f"Not a directory: {parent}",
            parent_error_kind=ErrorKind.NOT_DIRECTORY,
        )

    return replace(
        result,
        parent_valid=False,
        parent_kind=parent_kind,
        parent_message=f"Bad path: {parent} must be a directory",
        parent_error_kind=ErrorKind.BAD_PATH,
    )
