"""Read and write the tracker file and the protection marker."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from .models import ProtectionMarker, TrackingRecord


class GuardError(RuntimeError):
    """Base class for gitleaks-guard errors."""


class TrackerWriteError(GuardError):
    """Raised when the tracker file cannot be created or overwritten."""


class TrackerReadError(GuardError):
    """Raised when the tracker file is missing or malformed."""


class MarkerError(GuardError):
    """Raised when the protection marker cannot be read or written."""


def _dump(document: dict) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def write_tracker(path: Path, record: TrackingRecord) -> Path:
    """Replace the tracker file at ``path`` with ``record``."""

    path = Path(path)
    try:
        path.write_text(_dump(record.to_document()), encoding="utf-8")
    except OSError as exc:
        raise TrackerWriteError(f"Unable to write tracker file {path}: {exc}") from exc
    return path


def read_tracker(path: Path) -> TrackingRecord:
    """Load the record stored in the tracker file at ``path``."""

    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise TrackerReadError(f"Tracker file {path} does not exist") from exc
    except OSError as exc:
        raise TrackerReadError(f"Unable to read tracker file {path}: {exc}") from exc

    try:
        return TrackingRecord.from_document(json.loads(raw))
    except (json.JSONDecodeError, ValueError, ValidationError) as exc:
        raise TrackerReadError(f"Tracker file {path} is malformed: {exc}") from exc


def write_protection_marker(path: Path, marker: ProtectionMarker) -> Path:
    path = Path(path)
    try:
        path.write_text(_dump(marker.model_dump(mode="json")), encoding="utf-8")
    except OSError as exc:
        raise MarkerError(f"Unable to write protection marker {path}: {exc}") from exc
    return path


def read_protection_marker(path: Path) -> ProtectionMarker | None:
    """Return the existing marker, or ``None`` when there is none yet."""

    path = Path(path)
    if not path.exists():
        return None
    try:
        return ProtectionMarker.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as exc:
        raise MarkerError(f"Protection marker {path} is unreadable: {exc}") from exc


__all__ = [
    "GuardError",
    "MarkerError",
    "TrackerReadError",
    "TrackerWriteError",
    "read_protection_marker",
    "read_tracker",
    "write_protection_marker",
    "write_tracker",
]
