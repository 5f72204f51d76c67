"""Configuration management for gitleaks-guard."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

UNKNOWN = "unknown"
NEW_COMMIT = "new-commit"

SCHEMA_VERSION = "1.0"
PROTECTION_SETUP_VERSION = "1.0"

MARKER_TOKEN = "gitleaks-scan-executed"
SIGNED_OFF_LINE = "Signed-off-by: Gitleaks-Scanner <gitleaks@security.local>"
VERIFICATION_LINE = "✅ Gitleaks scan passed - no secrets detected"
MISSING_REPORT_WARNING = "No gitleaks report found"

# Commit sources for which the message is never annotated.
EXCLUDED_COMMIT_SOURCES = frozenset({"merge", "squash"})


class GuardSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    tracker_file: Path = Field(default=Path(".gitleaks-tracker"), validation_alias="GITLEAKS_TRACKER_FILE")
    report_path: Path = Field(
        default=Path(".gitleaks-report.json"), validation_alias="GITLEAKS_REPORT_PATH"
    )
    protection_marker_file: Path = Field(
        default=Path(".repo-protection-config.json"), validation_alias="GITLEAKS_PROTECTION_MARKER"
    )
    precommit_config: Path = Field(
        default=Path(".pre-commit-config.yaml"), validation_alias="GITLEAKS_PRECOMMIT_CONFIG"
    )
    git_path: str | None = Field(default=None, validation_alias="GITLEAKS_GUARD_GIT_PATH")
    stage_tracker: bool = Field(default=True, validation_alias="GITLEAKS_GUARD_STAGE_TRACKER")
    collect_versions: bool = Field(default=True, validation_alias="GITLEAKS_GUARD_COLLECT_VERSIONS")
    command_timeout: float = Field(default=10.0, validation_alias="GITLEAKS_GUARD_COMMAND_TIMEOUT")
    min_go_version: str = Field(default="1.19.0", validation_alias="GITLEAKS_GUARD_MIN_GO_VERSION")
    log_level: str = Field(default="INFO", validation_alias="GITLEAKS_GUARD_LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "GITLEAKS_GUARD_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("command_timeout")
    @classmethod
    def _validate_command_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("GITLEAKS_GUARD_COMMAND_TIMEOUT must be > 0")
        return value

    @field_validator("min_go_version")
    @classmethod
    def _validate_min_go_version(cls, value: str) -> str:
        normalized = value.strip().lstrip("v")
        parts = normalized.split(".")
        if not parts or not all(part.isdigit() for part in parts):
            raise ValueError("GITLEAKS_GUARD_MIN_GO_VERSION must be a dotted numeric version")
        return normalized


@lru_cache(maxsize=1)
def get_settings() -> GuardSettings:
    """Return cached settings instance."""

    return GuardSettings()


__all__ = [
    "EXCLUDED_COMMIT_SOURCES",
    "GuardSettings",
    "MARKER_TOKEN",
    "MISSING_REPORT_WARNING",
    "NEW_COMMIT",
    "PROTECTION_SETUP_VERSION",
    "SCHEMA_VERSION",
    "SIGNED_OFF_LINE",
    "UNKNOWN",
    "VERIFICATION_LINE",
    "get_settings",
]
