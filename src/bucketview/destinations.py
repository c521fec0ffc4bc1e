"""Local destination planning for object downloads.

The download pipeline calls :func:`plan_destinations` with its configured
download root and the object keys it is about to fetch, for single-item,
prefix, multi-select and sync downloads alike. Every key is confined with
:func:`~bucketview.security.paths.safe_path` exactly once, before anything is
created on disk. A key that fails the guard is marked failed on its own; the
other keys in the batch are unaffected.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from bucketview.security.exceptions import PathGuardError
from bucketview.security.paths import StrPath, safe_path
from bucketview.security.redact import friendly_redact

logger = logging.getLogger(__name__)

ERROR_CONTEXT = "Download"


@dataclass
class DestinationPlan:
    """Where one object will be written, or why it will not be."""

    key: str
    relative_path: str
    path: Optional[Path] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.path is not None and self.error is None

    @classmethod
    def accepted(cls, key: str, relative_path: str, path: Path) -> DestinationPlan:
        return cls(key=key, relative_path=relative_path, path=path)

    @classmethod
    def rejected(cls, key: str, relative_path: str, error: str) -> DestinationPlan:
        return cls(key=key, relative_path=relative_path, error=error)


def relative_destination(key: str, prefix: str = "") -> str:
    """Map an object key to a path relative to the download root.

    The listing prefix the user browsed into is dropped so a prefix download
    of ``reports/2024/`` writes ``q1.csv`` rather than ``reports/2024/q1.csv``.
    Keys ending in ``/`` are folder placeholders and map to ``""``.

    Examples:
        >>> relative_destination("reports/2024/q1.csv", "reports/2024/")
        'q1.csv'
        >>> relative_destination("reports/2024/", "reports/")
        ''
    """
    if key.endswith("/"):
        return ""
    if prefix and key.startswith(prefix):
        key = key[len(prefix) :]
    return key.lstrip("/")


def plan_destination(base_dir: StrPath, key: str, prefix: str = "") -> DestinationPlan:
    relative_path = relative_destination(key, prefix)
    try:
        path = safe_path(base_dir, relative_path)
    except PathGuardError as e:
        logger.warning(
            "Rejected destination for object key",
            extra={"key": key, "error_code": e.error_code},
        )
        return DestinationPlan.rejected(key, relative_path, friendly_redact(e, ERROR_CONTEXT))
    return DestinationPlan.accepted(key, relative_path, path)


def plan_destinations(
    base_dir: StrPath,
    keys: Iterable[str],
    prefix: str = "",
) -> list[DestinationPlan]:
    """Plan local paths for a batch of object keys.

    Keys that map to no file (folder placeholders, the prefix itself) are
    skipped. Failures are reported per key in
    :attr:`DestinationPlan.error` as display-safe text.
    """
    plans: list[DestinationPlan] = []
    for key in keys:
        if not relative_destination(key, prefix):
            continue
        plans.append(plan_destination(base_dir, key, prefix))

    rejected = sum(1 for plan in plans if not plan.ok)
    if rejected:
        logger.info("Planned %d destination(s), %d rejected", len(plans), rejected)
    return plans


__all__ = [
    "DestinationPlan",
    "relative_destination",
    "plan_destination",
    "plan_destinations",
]
