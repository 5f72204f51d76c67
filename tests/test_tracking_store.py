from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from gitleaks_guard.tracking import (
    MarkerError,
    ProtectionMarker,
    ScanStatus,
    TrackerReadError,
    TrackingRecord,
    read_protection_marker,
    read_tracker,
    repository_name,
    write_protection_marker,
    write_tracker,
)


def make_record(**overrides) -> TrackingRecord:
    fields = {
        "timestamp": datetime(2025, 3, 4, 5, 6, 7, 890, tzinfo=timezone.utc),
        "commit_hash": "abc123",
        "branch": "main",
        "user_email": "dev@example.com",
        "scan_status": ScanStatus.COMPLETED,
        "tool_versions": {"pre_commit": "pre-commit 3.7.0", "gitleaks": "8.18.2"},
    }
    fields.update(overrides)
    return TrackingRecord(**fields)


def test_document_matches_hook_format() -> None:
    document = make_record().to_document()

    assert list(document) == ["gitleaks_execution"]
    assert document["gitleaks_execution"] == {
        "timestamp": "2025-03-04T05:06:07Z",
        "commit_hash": "abc123",
        "branch": "main",
        "user_email": "dev@example.com",
        "pre_commit_version": "pre-commit 3.7.0",
        "gitleaks_version": "8.18.2",
        "scan_status": "completed",
        "tracking_version": "1.0",
    }


def test_timestamp_is_normalized_to_utc() -> None:
    local = datetime(2025, 3, 4, 7, 6, 7, tzinfo=timezone(timedelta(hours=2)))
    record = make_record(timestamp=local)
    assert record.to_document()["gitleaks_execution"]["timestamp"] == "2025-03-04T05:06:07Z"


def test_warning_must_match_status() -> None:
    with pytest.raises(ValidationError):
        make_record(scan_status=ScanStatus.POSSIBLY_SKIPPED, tool_versions={})
    with pytest.raises(ValidationError):
        make_record(warning="unexpected")


def test_write_then_read_skipped_record(tmp_path: Path) -> None:
    path = tmp_path / ".gitleaks-tracker"
    path.write_text("stale content that is not json", encoding="utf-8")
    record = make_record(
        scan_status=ScanStatus.POSSIBLY_SKIPPED,
        warning="No gitleaks report found",
        tool_versions={},
    )

    write_tracker(path, record)
    loaded = read_tracker(path)

    assert loaded.scan_status is ScanStatus.POSSIBLY_SKIPPED
    assert loaded.warning == "No gitleaks report found"
    assert json.loads(path.read_text(encoding="utf-8"))["gitleaks_execution"]["warning"]


def test_read_tracker_errors(tmp_path: Path) -> None:
    with pytest.raises(TrackerReadError):
        read_tracker(tmp_path / "missing")

    broken = tmp_path / "broken"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(TrackerReadError):
        read_tracker(broken)

    wrong_shape = tmp_path / "wrong"
    wrong_shape.write_text(json.dumps({"something": {}}), encoding="utf-8")
    with pytest.raises(TrackerReadError):
        read_tracker(wrong_shape)


def test_protection_marker_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / ".repo-protection-config.json"
    assert read_protection_marker(path) is None

    marker = ProtectionMarker(
        setup_timestamp="2025-01-01T00:00:00Z",
        repository="repo",
        last_updated="2025-01-02T00:00:00Z",
    )
    write_protection_marker(path, marker)

    loaded = read_protection_marker(path)
    assert loaded == marker
    assert loaded.features.execution_tracking is True

    path.write_text("[]", encoding="utf-8")
    with pytest.raises(MarkerError):
        read_protection_marker(path)


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("git@github.com:org/repo.git", "repo"),
        ("https://github.com/org/repo", "repo"),
        ("https://github.com/org/repo.git/", "repo"),
        ("unknown", "unknown"),
    ],
)
def test_repository_name(url: str, expected: str) -> None:
    assert repository_name(url) == expected
