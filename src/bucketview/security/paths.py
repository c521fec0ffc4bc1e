"""Destination path confinement for downloads.

This module keeps every locally written file inside its download root:
- Directory traversal (``../``) is rejected, absolute paths are re-rooted under the base
- Paths touching system roots (``/dev/``, ``/proc/``, ``/sys/``, ``/etc/``) are rejected
- Excessively long paths are rejected

Paths are canonicalized by string normalization only. Symbolic links inside
the base directory are not followed, so a link pointing outside the base is
not detected here.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from bucketview.security.exceptions import (
    BaseDirUnresolvableError,
    PathTooLongError,
    PathTraversalError,
    SystemPathDeniedError,
)

MAX_PATH_LENGTH = 4096

# Matched as substrings anywhere in the normalized path
DENIED_SYSTEM_PATHS: tuple[str, ...] = ("/dev/", "/proc/", "/sys/", "/etc/")

StrPath = Union[str, "os.PathLike[str]"]


def _resolve_base(base_dir: StrPath) -> str:
    try:
        return os.path.abspath(os.fspath(base_dir))
    except OSError as e:
        # abspath() needs the working directory for relative bases
        raise BaseDirUnresolvableError(f"invalid base directory: {e.strerror or e}") from e


def _join(base: str, relative_path: str) -> str:
    # An absolute relative_path must not replace the base in os.path.join
    return os.path.normpath(os.path.join(base, relative_path.lstrip("/" + os.sep)))


def _contains(base: str, candidate: str) -> bool:
    if candidate == base:
        return True
    prefix = base if base.endswith(os.sep) else base + os.sep
    return candidate.startswith(prefix)


def is_within(base_dir: StrPath, candidate: StrPath) -> bool:
    """Return True if ``candidate`` is ``base_dir`` or lies below it.

    Both paths are made absolute and normalized first. The comparison is
    separator-qualified, so ``/data/base`` does not contain ``/data/basefoo``.
    """
    base = os.path.abspath(os.fspath(base_dir))
    target = os.path.abspath(os.fspath(candidate))
    return _contains(base, target)


def safe_path(base_dir: StrPath, relative_path: StrPath) -> Path:
    """Join a relative path onto a trusted base directory and confine it.

    The checks run in a fixed order and the first violated one is reported:

    1. the base directory must resolve to an absolute path
    2. the joined, normalized path must stay inside the base
    3. it must not contain a denied system path fragment
    4. it must not exceed ``MAX_PATH_LENGTH`` characters

    Args:
        base_dir: Trusted download root.
        relative_path: Untrusted path, typically derived from an object key.
            Absolute values are treated as relative to ``base_dir``.

    Returns:
        The absolute, normalized destination path.

    Raises:
        BaseDirUnresolvableError: The base directory cannot be made absolute.
        PathTraversalError: The path escapes the base directory.
        SystemPathDeniedError: The path touches a system directory.
        PathTooLongError: The path is longer than ``MAX_PATH_LENGTH``.

    Examples:
        >>> safe_path("/srv/downloads", "reports/q1.csv")
        PosixPath('/srv/downloads/reports/q1.csv')
        >>> safe_path("/srv/downloads", "../etc/passwd")
        Traceback (most recent call last):
        ...
        bucketview.security.exceptions.PathTraversalError: path traversal detected: ...
    """
    base = _resolve_base(base_dir)
    full_path = _join(base, os.fspath(relative_path))

    if not _contains(base, full_path):
        raise PathTraversalError()

    for denied in DENIED_SYSTEM_PATHS:
        if denied in full_path:
            raise SystemPathDeniedError()

    if len(full_path) > MAX_PATH_LENGTH:
        raise PathTooLongError(MAX_PATH_LENGTH)

    return Path(full_path)


__all__ = [
    "MAX_PATH_LENGTH",
    "DENIED_SYSTEM_PATHS",
    "is_within",
    "safe_path",
]
