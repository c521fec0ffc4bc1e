"""
bucketview - browse and download objects from S3 buckets in the terminal

This package holds the security boundary the rest of the client relies on:
identifier validation, download path confinement and error redaction.
"""

from importlib.metadata import PackageNotFoundError, version


def __set_git_version__() -> str:
    """Return the installed distribution version, or "0.1.0" when running from source."""
    try:
        return version("bucketview")
    except PackageNotFoundError:
        return "0.1.0"


__version__ = __set_git_version__()
__author__ = "bucketview contributors"

from bucketview.config import Settings  # noqa: E402

__all__ = ["__version__", "Settings"]
