"""Live session precondition check."""

from collections.abc import Callable
from typing import Any

from .constants import ErrorKind
from .error_formatter import DEFAULT_NAME, format_error
from .exceptions import NormalizedError

NO_CONNECTION_MESSAGE = "No SFTP connection available"


def ensure_connected(
    client: Any,
    name: str = DEFAULT_NAME,
    reject: Callable[[NormalizedError], object] | None = None,
) -> bool:
    """Check that the client holds a live SFTP session.

    Args:
        client: Object exposing an ``sftp`` session attribute
        name: Component name used in the error message
        reject: If given, called with the error instead of raising it

    Returns:
        True if a session is present, False if reject was called

    Raises:
        NormalizedError: No session and no reject continuation given
    """
    if getattr(client, "sftp", None) is None:
        error = format_error(NO_CONNECTION_MESSAGE, name, ErrorKind.CONNECT)
        if reject is not None:
            reject(error)
            return False
        raise error
    return True
