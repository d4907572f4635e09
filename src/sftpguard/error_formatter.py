"""Normalization of errors into NormalizedError.

Every layer that sees an error may wrap it with its own component name and the
number of attempts it made. Errors are classified once, where they are first
observed; wrapping an already normalized error only adds context.

Usage:
    try:
        sftp.stat(path)
    except OSError as e:
        raise format_error(e, "exists") from e

    # Or let the caller pick between raising and a continuation
    handle_error(e, "exists", reject=future.set_exception)
"""

import logging
import socket
from collections.abc import Callable

from paramiko.ssh_exception import NoValidConnectionsError

from .constants import ErrorKind
from .error_classifier import error_code, error_message
from .exceptions import NormalizedError

logger = logging.getLogger(__name__)

DEFAULT_NAME = "sftp"
DEFAULT_LEVEL = "client-socket"


def retry_suffix(retry_count: int | None) -> str:
    """Build the ' after N attempt(s)' suffix, or '' without a count."""
    if not retry_count:
        return ""
    noun = "attempts" if retry_count > 1 else "attempt"
    return f" after {retry_count} {noun}"


def format_error(
    err: "BaseException | str | None" = None,
    name: str = DEFAULT_NAME,
    default_kind: "ErrorKind | str" = ErrorKind.GENERIC,
    retry_count: int | None = None,
) -> NormalizedError:
    """Build a NormalizedError from any error input.

    Args:
        err: Raw exception, plain message, already normalized error, or None
        name: Name of the reporting component, used as message prefix
        default_kind: Error kind for plain messages and codeless exceptions
        retry_count: Number of attempts made before giving up

    Returns:
        NormalizedError. Never raises.
    """
    if err is None:
        return NormalizedError(f"{name}: Undefined error - probably a bug!", ErrorKind.GENERIC)

    if isinstance(err, str):
        return NormalizedError(f"{name}: {err}{retry_suffix(retry_count)}", default_kind)

    if isinstance(err, NormalizedError):
        return err.with_context(name, retry_count)

    return _format_raw_error(err, name, default_kind, retry_count)


def _format_raw_error(
    err: BaseException,
    name: str,
    default_kind: "ErrorKind | str",
    retry_count: int | None,
) -> NormalizedError:
    code = _native_code(err)
    retry = retry_suffix(retry_count)
    level = getattr(err, "level", None) or DEFAULT_LEVEL

    if code == "ENOTFOUND":
        hostname = getattr(err, "hostname", None) or "unknown"
        msg = f"{name}: {level} error. Address lookup failed for host {hostname}{retry}"
    elif code == "ECONNREFUSED":
        msg = (
            f"{name}: {level} error. Remote host at "
            f"{_remote_address(err)} refused connection{retry}"
        )
    elif code == "ECONNRESET":
        msg = f"{name}: Remote host has reset the connection: {error_message(err)}{retry}"
    else:
        msg = f"{name}: {error_message(err)}{retry}"

    return NormalizedError(msg, code or default_kind)


def _native_code(err: BaseException) -> str | None:
    """Symbolic code of a raw error, including name resolution failures."""
    if isinstance(err, socket.gaierror):
        return "ENOTFOUND"

    if isinstance(err, NoValidConnectionsError) and err.errors:
        # Report the first underlying socket failure
        return error_code(next(iter(err.errors.values())))

    return error_code(err)


def _remote_address(err: BaseException) -> str:
    address = getattr(err, "address", None)
    if address:
        return str(address)

    if isinstance(err, NoValidConnectionsError) and err.errors:
        host, *_ = next(iter(err.errors))
        return str(host)
    return "unknown"


def handle_error(
    err: BaseException,
    name: str = DEFAULT_NAME,
    reject: Callable[[NormalizedError], object] | None = None,
) -> None:
    """Surface an error as a NormalizedError.

    Already normalized errors are passed on untouched; anything else is
    formatted first.

    Args:
        err: Error to surface
        name: Component name used when the error still needs formatting
        reject: If given, called with the error instead of raising it

    Raises:
        NormalizedError: When no reject continuation is given
    """
    normalized = err if isinstance(err, NormalizedError) else format_error(err, name)

    if reject is not None:
        reject(normalized)
        return

    if normalized is err:
        raise normalized
    raise normalized from err
