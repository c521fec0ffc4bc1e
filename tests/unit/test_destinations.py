"""Unit tests for destination planning."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from bucketview.destinations import (
    DestinationPlan,
    plan_destination,
    plan_destinations,
    relative_destination,
)


class TestRelativeDestination:
    """Tests for relative_destination()."""

    def test_strips_listing_prefix(self) -> None:
        assert relative_destination("reports/2024/q1.csv", "reports/2024/") == "q1.csv"

    def test_keeps_nested_structure(self) -> None:
        assert relative_destination("reports/2024/q1/a.csv", "reports/") == "2024/q1/a.csv"

    def test_no_prefix(self) -> None:
        assert relative_destination("logs/app.log") == "logs/app.log"

    def test_prefix_not_matching_is_ignored(self) -> None:
        assert relative_destination("other/file.txt", "reports/") == "other/file.txt"

    def test_folder_placeholder(self) -> None:
        assert relative_destination("reports/2024/", "reports/") == ""

    def test_leading_slash_removed(self) -> None:
        assert relative_destination("/absolute/key.txt") == "absolute/key.txt"


class TestPlanDestination:
    """Tests for plan_destination()."""

    def test_accepted(self, temp_download_dir: Path) -> None:
        plan = plan_destination(temp_download_dir, "reports/q1.csv", "reports/")
        assert plan.ok
        assert plan.path == Path(os.path.abspath(temp_download_dir)) / "q1.csv"
        assert plan.error is None

    def test_traversal_rejected_with_friendly_message(self, temp_download_dir: Path) -> None:
        plan = plan_destination(temp_download_dir, "../../outside.txt")
        assert not plan.ok
        assert plan.path is None
        assert plan.error == "Download: path traversal detected: path escapes base directory"

    def test_system_path_rejected(self, temp_download_dir: Path) -> None:
        plan = plan_destination(temp_download_dir, "backups/etc/shadow")
        assert not plan.ok
        assert plan.error == "Download: invalid path: cannot write to system directories"

    def test_rejection_is_logged(
        self, temp_download_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="bucketview.destinations"):
            plan_destination(temp_download_dir, "../escape")
        assert any(r.error_code == "PATH_TRAVERSAL" for r in caplog.records)


class TestPlanDestinations:
    """Tests for plan_destinations()."""

    def test_one_bad_key_does_not_fail_the_batch(self, temp_download_dir: Path) -> None:
        keys = ["data/a.csv", "data/../../../evil.sh", "data/b.csv"]
        plans = plan_destinations(temp_download_dir, keys, "data/")

        assert [p.key for p in plans] == keys
        assert [p.ok for p in plans] == [True, False, True]

    def test_skips_folder_placeholders(self, temp_download_dir: Path) -> None:
        plans = plan_destinations(temp_download_dir, ["data/", "data/sub/", "data/x.bin"], "data/")
        assert [p.key for p in plans] == ["data/x.bin"]

    def test_all_paths_inside_base(self, temp_download_dir: Path) -> None:
        keys = [f"prefix/dir{i}/file{i}.txt" for i in range(5)]
        base = os.path.abspath(temp_download_dir)
        for plan in plan_destinations(temp_download_dir, keys, "prefix/"):
            assert str(plan.path).startswith(base + os.sep)

    def test_does_not_touch_filesystem(self, temp_download_dir: Path) -> None:
        plan_destinations(temp_download_dir, ["new/dir/file.txt"])
        assert not (temp_download_dir / "new").exists()

    def test_accepts_generator(self, temp_download_dir: Path) -> None:
        plans = plan_destinations(temp_download_dir, (k for k in ["a.txt", "b.txt"]))
        assert len(plans) == 2


class TestDestinationPlan:
    def test_constructors(self) -> None:
        ok = DestinationPlan.accepted("k", "k", Path("/tmp/k"))
        bad = DestinationPlan.rejected("k", "k", "Download: nope")
        assert ok.ok
        assert not bad.ok
