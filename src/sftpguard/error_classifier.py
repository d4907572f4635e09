"""Classification of local filesystem errors.

Maps the symbolic code of a failed local filesystem call onto the normalized
error kinds, with a message that names the path the call was made on.
"""

import errno

from .constants import ErrorKind

# Symbolic code -> (error kind, message template)
_LOCAL_RULES: dict[str, tuple[ErrorKind, str]] = {
    "EACCES": (ErrorKind.PERMISSION, "Permission denied: {path}"),
    "EPERM": (ErrorKind.PERMISSION, "Permission denied: {path}"),
    "ENOENT": (ErrorKind.NOT_EXIST, "No such file: {path}"),
    "ENOTDIR": (ErrorKind.NOT_DIRECTORY, "Not a directory: {path}"),
}


def error_code(err: BaseException) -> str | None:
    """Get the symbolic failure code of an error.

    A string ``code`` attribute wins; otherwise the errno of an OSError is
    translated to its symbolic name (``2`` -> ``ENOENT``).

    Returns:
        Symbolic code, or None when the error carries none
    """
    code = getattr(err, "code", None)
    if isinstance(code, str) and code:
        return code

    number = getattr(err, "errno", None)
    if isinstance(number, int):
        return errno.errorcode.get(number)
    return None


def error_message(err: BaseException) -> str:
    """Get the raw message of an error without the errno decoration."""
    message = getattr(err, "message", None)
    if isinstance(message, str) and message:
        return message

    if isinstance(err, OSError) and err.strerror:
        if err.filename is not None:
            return f"{err.strerror}: {err.filename}"
        return err.strerror
    return str(err)


def classify_error(err: BaseException, subject_path: str) -> tuple[str, "ErrorKind | str"]:
    """Classify a local filesystem error.

    Args:
        err: Error raised by a local filesystem call
        subject_path: Path the call was made on; named in the message

    Returns:
        (message, error_kind) tuple. Unknown codes are passed through as the
        error kind with the raw message; errors without a code are generic.
    """
    code = error_code(err)
    if code in _LOCAL_RULES:
        kind, template = _LOCAL_RULES[code]
        return template.format(path=subject_path), kind

    return error_message(err), code or ErrorKind.GENERIC
