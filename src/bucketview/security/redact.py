"""Error text redaction and classification.

Every failure that reaches a status line or a log record passes through
here first. :func:`raw_redact` strips account ids, ARNs, bucket names,
access keys and home-directory usernames from error text.
:func:`friendly_redact` maps known failure signatures to a short canned
message and falls back to the raw-redacted text otherwise.

Neither function raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class RedactionRule:
    pattern: re.Pattern[str]
    replacement: str

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


# Applied in order. No replacement text matches any pattern, so running the
# pipeline on its own output changes nothing.
REDACTION_RULES: tuple[RedactionRule, ...] = (
    RedactionRule(re.compile(r"\b\d{12}\b", re.ASCII), "[account-id]"),
    RedactionRule(re.compile(r"arn:aws:[^:\s]+:[^:\s]*:[^:\s]*:[^\s]+", re.ASCII), "[arn]"),
    RedactionRule(
        re.compile(r"""bucket[:\s]+['"]?([a-z0-9.-]+)['"]?""", re.ASCII),
        "bucket: [bucket]",
    ),
    RedactionRule(re.compile(r"AKIA[A-Z0-9]{16}"), "[access-key]"),
    RedactionRule(re.compile(r"/Users/[^/\s]+", re.ASCII), "/Users/[user]"),
    RedactionRule(re.compile(r"/home/[^/\s]+", re.ASCII), "/home/[user]"),
)


class ErrorCategory(str, Enum):
    ACCESS_DENIED = "access_denied"
    BUCKET_NOT_FOUND = "bucket_not_found"
    OBJECT_NOT_FOUND = "object_not_found"
    CREDENTIALS_EXPIRED = "credentials_expired"
    CREDENTIAL_ERROR = "credential_error"
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    UNKNOWN = "unknown"


FRIENDLY_MESSAGES: dict[ErrorCategory, str] = {
    ErrorCategory.ACCESS_DENIED: "access denied - check your permissions",
    ErrorCategory.BUCKET_NOT_FOUND: "bucket not found",
    ErrorCategory.OBJECT_NOT_FOUND: "object not found",
    ErrorCategory.CREDENTIALS_EXPIRED: "credentials expired - run 'aws sso login'",
    ErrorCategory.CREDENTIAL_ERROR: "credential error - check your AWS configuration",
    ErrorCategory.TIMEOUT: "request timed out",
    ErrorCategory.CONNECTION_ERROR: "connection error - check your network",
}

# First match wins. Signatures co-occur in real messages (an expired token
# error that also mentions a timeout), so the order here is the precedence.
ERROR_SIGNATURES: tuple[tuple[tuple[str, ...], ErrorCategory], ...] = (
    (("access denied", "accessdenied"), ErrorCategory.ACCESS_DENIED),
    (("no such bucket", "nosuchbucket"), ErrorCategory.BUCKET_NOT_FOUND),
    (("no such key", "nosuchkey"), ErrorCategory.OBJECT_NOT_FOUND),
    (("expired", "token"), ErrorCategory.CREDENTIALS_EXPIRED),
    (("credential",), ErrorCategory.CREDENTIAL_ERROR),
    (("timeout", "deadline"), ErrorCategory.TIMEOUT),
    (("connection",), ErrorCategory.CONNECTION_ERROR),
)


def _error_text(error: Any) -> str:
    try:
        return str(error)
    except Exception:
        return type(error).__name__


def _error_code(error: Any) -> str:
    """Extract the service error code from a botocore-style ClientError."""
    response = getattr(error, "response", None)
    if not isinstance(response, dict):
        return ""
    details = response.get("Error")
    if not isinstance(details, dict):
        return ""
    code = details.get("Code")
    return code if isinstance(code, str) else ""


def redact_text(text: str) -> str:
    for rule in REDACTION_RULES:
        text = rule.apply(text)
    return text


def raw_redact(error: Any) -> str:
    """Return the error's text with sensitive substrings replaced.

    Args:
        error: An exception, a plain message string, or ``None``.

    Returns:
        The redacted message, or ``""`` when ``error`` is ``None``.

    Examples:
        >>> raw_redact("denied for arn:aws:iam::123456789012:user/alice")
        'denied for [arn]'
        >>> raw_redact(None)
        ''
    """
    if error is None:
        return ""
    return redact_text(_error_text(error))


def classify_error(error: Any) -> ErrorCategory:
    if error is None:
        return ErrorCategory.UNKNOWN

    text = _error_text(error).lower()
    code = _error_code(error).lower()
    if code:
        text = f"{code} {text}"

    for needles, category in ERROR_SIGNATURES:
        if any(needle in text for needle in needles):
            return category
    return ErrorCategory.UNKNOWN


def friendly_redact(error: Any, context: str) -> str:
    """Return a short ``"<context>: <message>"`` line safe for display.

    Known failure signatures become canned messages that carry none of the
    original text. Anything else falls back to :func:`raw_redact`, so the
    result never contains unredacted error text.

    Args:
        error: An exception, a plain message string, or ``None``.
        context: Short label for the action that failed, e.g. ``"Loading"``.
    """
    if error is None:
        return ""

    category = classify_error(error)
    if category is ErrorCategory.UNKNOWN:
        return f"{context}: {raw_redact(error)}"
    return f"{context}: {FRIENDLY_MESSAGES[category]}"


__all__ = [
    "RedactionRule",
    "REDACTION_RULES",
    "ErrorCategory",
    "FRIENDLY_MESSAGES",
    "ERROR_SIGNATURES",
    "redact_text",
    "raw_redact",
    "classify_error",
    "friendly_redact",
]
