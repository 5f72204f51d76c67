"""Tracker file models and persistence."""

from .models import (
    ProtectionFeatures,
    ProtectionMarker,
    ScanStatus,
    TrackingRecord,
    format_timestamp,
    repository_name,
)
from .store import (
    GuardError,
    MarkerError,
    TrackerReadError,
    TrackerWriteError,
    read_protection_marker,
    read_tracker,
    write_protection_marker,
    write_tracker,
)

__all__ = [
    "GuardError",
    "MarkerError",
    "ProtectionFeatures",
    "ProtectionMarker",
    "ScanStatus",
    "TrackerReadError",
    "TrackerWriteError",
    "TrackingRecord",
    "format_timestamp",
    "read_protection_marker",
    "read_tracker",
    "repository_name",
    "write_protection_marker",
    "write_tracker",
]
