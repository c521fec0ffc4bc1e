"""Exceptions raised at the security boundary.

Every message carried by these exceptions is already safe to display or log.
None of them is retried by the boundary layer; retry policy belongs to the
caller.
"""

from __future__ import annotations

from typing import Optional


class SecurityBoundaryError(ValueError):
    def __init__(self, message: str, error_code: str = "SECURITY_ERROR"):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class InputInvalidError(SecurityBoundaryError):
    """A bookmark label, profile name or bucket name was rejected.

    ``constraint`` names the violated rule (``"empty"``, ``"length"`` or
    ``"charset"``) so input forms can highlight it.
    """

    def __init__(
        self,
        reason: str,
        field: Optional[str] = None,
        constraint: Optional[str] = None,
    ):
        super().__init__(reason, "INPUT_INVALID")
        self.reason = reason
        self.field = field
        self.constraint = constraint


class PathGuardError(SecurityBoundaryError):
    pass


class PathTraversalError(PathGuardError):
    def __init__(self, message: str = "path traversal detected: path escapes base directory"):
        super().__init__(message, "PATH_TRAVERSAL")


class SystemPathDeniedError(PathGuardError):
    def __init__(self, message: str = "invalid path: cannot write to system directories"):
        super().__init__(message, "SYSTEM_PATH_DENIED")


class PathTooLongError(PathGuardError):
    def __init__(self, max_length: int):
        super().__init__(f"path too long (max {max_length} characters)", "PATH_TOO_LONG")
        self.max_length = max_length


class BaseDirUnresolvableError(PathGuardError):
    def __init__(self, message: str = "invalid base directory"):
        super().__init__(message, "BASE_DIR_UNRESOLVABLE")
