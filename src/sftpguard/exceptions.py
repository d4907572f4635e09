"""Custom exceptions for path validation."""

from .constants import ErrorKind


class SftpGuardError(Exception):
    """Base exception for sftpguard errors."""

    pass


class NormalizedError(SftpGuardError):
    """Error that has already been classified and given a readable message.

    The message already carries the name of the component that reported the
    error (and a retry suffix where one applies). Wrapping a NormalizedError
    again only adds a prefix; the error kind is never re-derived.
    """

    custom = True

    def __init__(self, message: str, error_kind: "ErrorKind | str" = ErrorKind.GENERIC):
        super().__init__(message)
        self.message = message
        self.error_kind = error_kind

    @property
    def code(self) -> "ErrorKind | str":
        """Alias of error_kind."""
        return self.error_kind

    def with_context(self, name: str, retry_count: int | None = None) -> "NormalizedError":
        """Return a copy prefixed with another component name."""
        # Local import: error_formatter imports this module.
        from .error_formatter import retry_suffix

        return type(self)(f"{name}: {self.message}{retry_suffix(retry_count)}", self.error_kind)

    def __repr__(self) -> str:
        kind = getattr(self.error_kind, "value", self.error_kind)
        return f"{type(self).__name__}({self.message!r}, {kind!r})"


class UnsupportedOperationError(NormalizedError):
    """Operation kind is not one of the known kinds."""

    pass


class ConfigError(SftpGuardError):
    """Configuration could not be loaded."""

    pass
