"""Data models for the tracker file and the protection marker."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from ..config import PROTECTION_SETUP_VERSION, SCHEMA_VERSION

TRACKER_ROOT_KEY = "gitleaks_execution"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_VERSION_SUFFIX = "_version"
_RESERVED_KEYS = {
    "timestamp",
    "commit_hash",
    "branch",
    "user_email",
    "scan_status",
    "tracking_version",
    "warning",
}


def format_timestamp(value: datetime) -> str:
    """Render a UTC timestamp the way the hook has always written it."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


class ScanStatus(str, Enum):
    COMPLETED = "completed"
    POSSIBLY_SKIPPED = "possibly_skipped"


class TrackingRecord(BaseModel):
    """Outcome of one hook invocation, persisted to the tracker file."""

    timestamp: datetime = Field(..., description="UTC generation time of the record.")
    commit_hash: str = Field(..., description="Resolved HEAD hash or a sentinel.")
    branch: str = Field(..., description="Current branch name or a sentinel.")
    user_email: str = Field(..., description="Committer email from git config or a sentinel.")
    scan_status: ScanStatus
    warning: str | None = Field(
        default=None,
        description="Advisory text, only present when the scan was possibly skipped.",
    )
    tool_versions: dict[str, str] = Field(
        default_factory=dict,
        description="Tool name to version string, collected best-effort.",
    )
    tracking_version: str = Field(default=SCHEMA_VERSION)

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).replace(microsecond=0)

    @model_validator(mode="after")
    def _check_warning(self) -> "TrackingRecord":
        if self.scan_status is ScanStatus.POSSIBLY_SKIPPED and not self.warning:
            raise ValueError("possibly_skipped records must carry a warning")
        if self.scan_status is ScanStatus.COMPLETED and self.warning is not None:
            raise ValueError("completed records must not carry a warning")
        return self

    def to_document(self) -> dict[str, Any]:
        """Return the JSON document written to the tracker file."""

        body: dict[str, Any] = {
            "timestamp": format_timestamp(self.timestamp),
            "commit_hash": self.commit_hash,
            "branch": self.branch,
            "user_email": self.user_email,
        }
        for tool, version in self.tool_versions.items():
            body[f"{tool}{_VERSION_SUFFIX}"] = version
        body["scan_status"] = self.scan_status.value
        body["tracking_version"] = self.tracking_version
        if self.warning is not None:
            body["warning"] = self.warning
        return {TRACKER_ROOT_KEY: body}

    @classmethod
    def from_document(cls, document: Any) -> "TrackingRecord":
        """Rebuild a record from a parsed tracker file."""

        if not isinstance(document, dict) or not isinstance(document.get(TRACKER_ROOT_KEY), dict):
            raise ValueError(f"Tracker document must contain a '{TRACKER_ROOT_KEY}' object")
        body = dict(document[TRACKER_ROOT_KEY])
        tool_versions: dict[str, str] = {}
        for key in list(body):
            if key not in _RESERVED_KEYS and key.endswith(_VERSION_SUFFIX):
                tool_versions[key[: -len(_VERSION_SUFFIX)]] = str(body.pop(key))
        body["tool_versions"] = tool_versions
        return cls.model_validate(body)


class ProtectionFeatures(BaseModel):
    pre_commit_gitleaks: bool = True
    execution_tracking: bool = True
    detect_secrets: bool = False


class ProtectionMarker(BaseModel):
    """Marker recording that secret-leak protection was set up for a repository."""

    protection_enabled: bool = True
    setup_timestamp: str
    setup_version: str = Field(default=PROTECTION_SETUP_VERSION)
    repository: str
    features: ProtectionFeatures = Field(default_factory=ProtectionFeatures)
    last_updated: str

    @field_validator("repository")
    @classmethod
    def _normalize_repository(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Repository name must not be empty")
        return normalized


def repository_name(remote_url: str) -> str:
    """Derive ``name`` from ``git@host:org/name.git`` or ``https://host/org/name``."""

    trimmed = remote_url.strip().rstrip("/")
    name = trimmed.replace(":", "/").rsplit("/", 1)[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name


__all__ = [
    "ProtectionFeatures",
    "ProtectionMarker",
    "ScanStatus",
    "TIMESTAMP_FORMAT",
    "TRACKER_ROOT_KEY",
    "TrackingRecord",
    "format_timestamp",
    "repository_name",
]
