"""Tests for bookmark, profile and bucket name validation.

Covers:
- Empty-value policy per identifier kind
- Length limits
- Allowed character sets
- Reason strings surfaced to input forms
"""

import pytest

from bucketview.security.exceptions import InputInvalidError
from bucketview.security.validators import (
    MAX_BOOKMARK_NAME_LENGTH,
    MAX_BUCKET_NAME_LENGTH,
    MAX_PROFILE_NAME_LENGTH,
    is_valid,
    validate_bookmark_name,
    validate_bucket_name,
    validate_profile_name,
)


class TestBookmarkName:
    """Test suite for bookmark label validation."""

    @pytest.mark.parametrize(
        "name",
        ["my-bookmark", "my bookmark", "my.bookmark", "my/bookmark", "logs_2024", "a"],
    )
    def test_accepts_valid_names(self, name):
        assert validate_bookmark_name(name) == name

    def test_rejects_empty(self):
        with pytest.raises(InputInvalidError) as exc_info:
            validate_bookmark_name("")
        assert exc_info.value.reason == "bookmark name cannot be empty"
        assert exc_info.value.constraint == "empty"

    def test_rejects_too_long(self):
        with pytest.raises(InputInvalidError) as exc_info:
            validate_bookmark_name("a" * (MAX_BOOKMARK_NAME_LENGTH + 1))
        assert exc_info.value.reason == "bookmark name too long (max 255 characters)"
        assert exc_info.value.constraint == "length"

    def test_accepts_max_length(self):
        name = "a" * MAX_BOOKMARK_NAME_LENGTH
        assert validate_bookmark_name(name) == name

    def test_length_checked_before_charset(self):
        """A long name of illegal characters reports the length violation."""
        with pytest.raises(InputInvalidError) as exc_info:
            validate_bookmark_name("\x00" * 300)
        assert exc_info.value.constraint == "length"

    @pytest.mark.parametrize("name", ["my<>bookmark", "my;bookmark", "name|pipe", "a*b", "日本"])
    def test_rejects_invalid_characters(self, name):
        with pytest.raises(InputInvalidError) as exc_info:
            validate_bookmark_name(name)
        assert exc_info.value.reason == "bookmark name contains invalid characters"
        assert exc_info.value.constraint == "charset"
        assert exc_info.value.field == "bookmark name"

    def test_rejects_trailing_newline(self):
        """The whole value must match, not just a prefix."""
        assert not is_valid(validate_bookmark_name, "bookmark;\n")
        assert is_valid(validate_bookmark_name, "bookmark\n")


class TestProfileName:
    """Test suite for credentials profile name validation."""

    @pytest.mark.parametrize("name", ["my-profile", "my_profile", "profile123", "PROD"])
    def test_accepts_valid_names(self, name):
        assert validate_profile_name(name) == name

    def test_empty_means_default(self):
        assert validate_profile_name("") == ""

    def test_rejects_too_long(self):
        with pytest.raises(InputInvalidError) as exc_info:
            validate_profile_name("p" * (MAX_PROFILE_NAME_LENGTH + 1))
        assert exc_info.value.reason == "profile name too long (max 128 characters)"

    @pytest.mark.parametrize("name", ["my profile", "my.profile", "team/dev", "prod!"])
    def test_rejects_characters_allowed_in_bookmarks(self, name):
        """Profile names are narrower than bookmark names: no spaces, dots or slashes."""
        with pytest.raises(InputInvalidError) as exc_info:
            validate_profile_name(name)
        assert exc_info.value.reason == "profile name contains invalid characters"


class TestBucketName:
    """Test suite for the simplified bucket naming rule."""

    @pytest.mark.parametrize(
        "name",
        ["my-bucket", "my.bucket.name", "bucket123", "abc", "a" * MAX_BUCKET_NAME_LENGTH],
    )
    def test_accepts_valid_names(self, name):
        assert validate_bucket_name(name) == name

    def test_empty_means_unset(self):
        assert validate_bucket_name("") == ""

    @pytest.mark.parametrize("name", ["ab", "a", "b" * (MAX_BUCKET_NAME_LENGTH + 1)])
    def test_rejects_length_outside_range(self, name):
        with pytest.raises(InputInvalidError) as exc_info:
            validate_bucket_name(name)
        assert exc_info.value.reason == "bucket name must be 3-63 characters"
        assert exc_info.value.constraint == "length"

    @pytest.mark.parametrize(
        "name",
        ["My-Bucket", "my_bucket", "-bucket", "bucket-", ".bucket", "bucket.", "my bucket"],
    )
    def test_rejects_invalid_format(self, name):
        with pytest.raises(InputInvalidError) as exc_info:
            validate_bucket_name(name)
        assert exc_info.value.reason == "invalid bucket name format"

    @pytest.mark.parametrize("name", ["192.168.1.1", "my..bucket", "a-.b"])
    def test_simplified_rule_is_not_tightened(self, name):
        """IPv4-shaped names and consecutive dots pass the simplified rule."""
        assert validate_bucket_name(name) == name


class TestIsValid:
    def test_returns_bool(self):
        assert is_valid(validate_bucket_name, "logs-archive") is True
        assert is_valid(validate_bucket_name, "Logs") is False

    def test_input_invalid_is_a_value_error(self):
        """Callers that catch ValueError also catch validation failures."""
        with pytest.raises(ValueError):
            validate_profile_name("bad name")
