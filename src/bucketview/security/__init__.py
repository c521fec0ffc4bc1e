"""
Security boundary: identifier validation, download path confinement and
error text redaction.
"""
from .exceptions import (
    BaseDirUnresolvableError,
    InputInvalidError,
    PathGuardError,
    PathTooLongError,
    PathTraversalError,
    SecurityBoundaryError,
    SystemPathDeniedError,
)
from .paths import MAX_PATH_LENGTH, is_within, safe_path
from .redact import ErrorCategory, classify_error, friendly_redact, raw_redact
from .validators import (
    is_valid,
    validate_bookmark_name,
    validate_bucket_name,
    validate_profile_name,
)

__all__ = [
    # Validation
    "validate_bookmark_name",
    "validate_profile_name",
    "validate_bucket_name",
    "is_valid",
    # Path confinement
    "safe_path",
    "is_within",
    "MAX_PATH_LENGTH",
    # Redaction
    "raw_redact",
    "friendly_redact",
    "classify_error",
    "ErrorCategory",
    # Exception hierarchy
    "SecurityBoundaryError",
    "InputInvalidError",
    "PathGuardError",
    "PathTraversalError",
    "SystemPathDeniedError",
    "PathTooLongError",
    "BaseDirUnresolvableError",
]
