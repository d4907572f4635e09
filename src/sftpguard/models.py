"""Validation result value object."""

from dataclasses import asdict, dataclass
from typing import Any

from .constants import ErrorKind, OperationKind, TargetKind
from .exceptions import UnsupportedOperationError


def coerce_operation(operation: "OperationKind | str", name: str) -> OperationKind:
    """Convert an operation kind or its string value to an OperationKind.

    Raises:
        UnsupportedOperationError: Not one of the six operation kinds
    """
    try:
        return OperationKind(operation)
    except ValueError:
        raise UnsupportedOperationError(
            f"{name}: Unknown operation kind: {operation}", ErrorKind.GENERIC
        ) from None


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one path for one operation.

    Attributes:
        path: Normalized absolute path that was checked
        valid: True if the target satisfies the operation's policy
        kind: Kind of the target observed during the check
        message: Explanation, set only when valid is False
        error_kind: Classification, set only when valid is False
        parent_valid: Whether the parent can hold a new target. Only set for
            write operations whose target is missing or wrong
        parent_kind: Kind of the parent directory, when it was probed
        parent_message: Explanation when parent_valid is False
        parent_error_kind: Classification when parent_valid is False
    """

    path: str
    valid: bool = True
    kind: TargetKind = TargetKind.NONE
    message: str | None = None
    error_kind: ErrorKind | str | None = None
    parent_valid: bool | None = None
    parent_kind: TargetKind | None = None
    parent_message: str | None = None
    parent_error_kind: ErrorKind | str | None = None

    def __post_init__(self):
        """Enforce that explanations accompany invalid results only."""
        if not self.path:
            raise ValueError("ValidationResult requires a path")
        if self.valid and (self.message is not None or self.error_kind is not None):
            raise ValueError("Valid result cannot carry an error message or kind")
        if not self.valid and (self.message is None or self.error_kind is None):
            raise ValueError("Invalid result requires a message and an error kind")
        if self.valid and self.parent_valid is not None:
            raise ValueError("Parent is only probed for invalid results")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        data = asdict(self)
        return {
            k: getattr(v, "value", v) for k, v in data.items() if v is not None
        }
