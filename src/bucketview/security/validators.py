"""Syntactic validation for user-supplied identifiers.

Bookmark labels, profile names and bucket names are checked here before an
input form accepts them for persistence or uses them to address a bucket.
Each validator returns the value unchanged or raises
:class:`InputInvalidError` whose reason is meant to be shown verbatim.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar

from bucketview.security.exceptions import InputInvalidError

MAX_BOOKMARK_NAME_LENGTH = 255
MAX_PROFILE_NAME_LENGTH = 128
MIN_BUCKET_NAME_LENGTH = 3
MAX_BUCKET_NAME_LENGTH = 63


@dataclass(frozen=True)
class ValidationRule:
    """Length and charset contract for one identifier kind."""

    EMPTY: ClassVar[str] = "empty"
    LENGTH: ClassVar[str] = "length"
    CHARSET: ClassVar[str] = "charset"

    kind: str
    max_length: int
    pattern: re.Pattern[str]
    allow_empty: bool
    min_length: int = 1
    length_message: str = ""
    charset_message: str = ""

    def check(self, value: str) -> str:
        if not value:
            if self.allow_empty:
                return value
            raise InputInvalidError(
                f"{self.kind} cannot be empty", field=self.kind, constraint=self.EMPTY
            )

        if len(value) < self.min_length or len(value) > self.max_length:
            raise InputInvalidError(
                self.length_message or f"{self.kind} too long (max {self.max_length} characters)",
                field=self.kind,
                constraint=self.LENGTH,
            )

        if not self.pattern.fullmatch(value):
            raise InputInvalidError(
                self.charset_message or f"{self.kind} contains invalid characters",
                field=self.kind,
                constraint=self.CHARSET,
            )

        return value


# Word characters, whitespace, dots, slashes and hyphens
BOOKMARK_NAME_RULE = ValidationRule(
    kind="bookmark name",
    max_length=MAX_BOOKMARK_NAME_LENGTH,
    pattern=re.compile(r"[\w\s./-]+", re.ASCII),
    allow_empty=False,
)

# Matches the profile naming used by the AWS shared config files
PROFILE_NAME_RULE = ValidationRule(
    kind="profile name",
    max_length=MAX_PROFILE_NAME_LENGTH,
    pattern=re.compile(r"[A-Za-z0-9_-]+"),
    allow_empty=True,
)

# Simplified S3 naming: IPv4-shaped names and consecutive dots are accepted.
BUCKET_NAME_RULE = ValidationRule(
    kind="bucket name",
    max_length=MAX_BUCKET_NAME_LENGTH,
    min_length=MIN_BUCKET_NAME_LENGTH,
    pattern=re.compile(r"[a-z0-9][a-z0-9.-]*[a-z0-9]"),
    allow_empty=True,
    length_message=f"bucket name must be {MIN_BUCKET_NAME_LENGTH}-{MAX_BUCKET_NAME_LENGTH} characters",
    charset_message="invalid bucket name format",
)


def validate_bookmark_name(name: str) -> str:
    """Validate a bookmark label.

    Raises:
        InputInvalidError: If the name is empty, longer than 255 characters,
            or contains characters other than word characters, whitespace,
            ``.``, ``/`` and ``-``.
    """
    return BOOKMARK_NAME_RULE.check(name)


def validate_profile_name(name: str) -> str:
    """Validate a credentials profile name. Empty means the default profile."""
    return PROFILE_NAME_RULE.check(name)


def validate_bucket_name(name: str) -> str:
    """Validate a bucket name. Empty means unset (the UI prompts for one)."""
    return BUCKET_NAME_RULE.check(name)


def is_valid(validator: Callable[[str], str], value: str) -> bool:
    try:
        validator(value)
    except InputInvalidError:
        return False
    return True


__all__ = [
    "ValidationRule",
    "BOOKMARK_NAME_RULE",
    "PROFILE_NAME_RULE",
    "BUCKET_NAME_RULE",
    "MAX_BOOKMARK_NAME_LENGTH",
    "MAX_PROFILE_NAME_LENGTH",
    "MIN_BUCKET_NAME_LENGTH",
    "MAX_BUCKET_NAME_LENGTH",
    "validate_bookmark_name",
    "validate_profile_name",
    "validate_bucket_name",
    "is_valid",
]
