"""Public constant surface: operation kinds, error kinds and target kinds."""

from enum import Enum


class OperationKind(str, Enum):
    """Intent of the operation a path is validated for."""

    READ_FILE = "readFile"
    READ_DIR = "readDir"
    READ_OBJECT = "readObject"
    WRITE_FILE = "writeFile"
    WRITE_DIR = "writeDir"
    WRITE_OBJECT = "writeObject"

    @property
    def is_write(self) -> bool:
        """Check if this operation creates or modifies the target."""
        return self in (
            OperationKind.WRITE_FILE,
            OperationKind.WRITE_DIR,
            OperationKind.WRITE_OBJECT,
        )

    @property
    def is_read(self) -> bool:
        """Check if this operation only reads the target."""
        return not self.is_write


class ErrorKind(str, Enum):
    """Normalized error classification.

    Native failure codes (``ECONNRESET`` etc.) that match no rule are passed
    through as plain strings, so code comparing error kinds should compare
    against strings or members interchangeably.
    """

    GENERIC = "generic"
    PERMISSION = "permission"
    NOT_EXIST = "notExist"
    NOT_DIRECTORY = "notDirectory"
    BAD_PATH = "badPath"
    CONNECT = "connect"


class TargetKind(str, Enum):
    """Observed kind of a filesystem object."""

    NONE = "none"
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"

    @classmethod
    def from_code(cls, code: "str | TargetKind | bool | None") -> "TargetKind":
        """Convert a collaborator's kind report to a TargetKind.

        Accepts members, their values, ``ls -l`` style letters
        (``-``, ``d``, ``l``) and falsy values for a missing target.

        Raises:
            ValueError: Unknown kind code
        """
        if isinstance(code, TargetKind):
            return code
        if not code:
            return cls.NONE
        if code in _LETTER_CODES:
            return _LETTER_CODES[code]
        return cls(code)


_LETTER_CODES = {
    "-": TargetKind.FILE,
    "d": TargetKind.DIRECTORY,
    "l": TargetKind.SYMLINK,
}
