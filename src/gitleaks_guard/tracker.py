"""Record whether Gitleaks ran for the commit being prepared."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable

from .annotation import annotate_commit_message
from .config import MISSING_REPORT_WARNING, NEW_COMMIT, UNKNOWN, GuardSettings
from .git import GitLookupError, RepositoryContext, resolve_or
from .probes import VersionProbe, collect_versions
from .tracking import ScanStatus, TrackingRecord, format_timestamp, write_tracker

logger = logging.getLogger(__name__)


class ExecutionTracker:
    """Write the tracker file, annotate the message and clean up the report."""

    def __init__(
        self,
        settings: GuardSettings,
        context: RepositoryContext,
        *,
        probes: Iterable[VersionProbe] = (),
        root: Path | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._settings = settings
        self._context = context
        self._probes = list(probes)
        self._root = Path(root) if root is not None else Path.cwd()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def tracker_path(self) -> Path:
        return self._resolve(self._settings.tracker_file)

    @property
    def default_report_path(self) -> Path:
        return self._resolve(self._settings.report_path)

    def _resolve(self, path: Path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self._root / path

    def build_record(self, report_found: bool) -> TrackingRecord:
        """Gather repository context into a record; lookups never raise."""

        tool_versions: dict[str, str] = {}
        if report_found and self._settings.collect_versions:
            tool_versions = collect_versions(self._probes, fallback=UNKNOWN)

        return TrackingRecord(
            timestamp=self._clock(),
            commit_hash=resolve_or(self._context.head_hash, NEW_COMMIT),
            branch=resolve_or(self._context.current_branch, UNKNOWN),
            user_email=resolve_or(self._context.user_email, UNKNOWN),
            scan_status=ScanStatus.COMPLETED if report_found else ScanStatus.POSSIBLY_SKIPPED,
            warning=None if report_found else MISSING_REPORT_WARNING,
            tool_versions=tool_versions,
        )

    def track(
        self,
        commit_msg_path: Path | None,
        commit_source: str | None = None,
        report_path: Path | None = None,
    ) -> TrackingRecord:
        """Run one tracking pass for the commit being prepared.

        Raises ``TrackerWriteError`` when the tracker file cannot be written;
        the report artifact is removed even then.
        """

        report = self._resolve(report_path) if report_path is not None else self.default_report_path
        logger.info("Tracking Gitleaks execution")
        try:
            report_found = report.is_file()
            if report_found:
                logger.info("Gitleaks report found - scan completed", extra={"report": str(report)})
            else:
                logger.warning(
                    "No Gitleaks report found - scan may have been skipped",
                    extra={"report": str(report)},
                )

            record = self.build_record(report_found)
            write_tracker(self.tracker_path, record)

            if record.scan_status is ScanStatus.COMPLETED:
                self._annotate(commit_msg_path, commit_source, format_timestamp(record.timestamp))

            if self._settings.stage_tracker:
                self._stage()
        finally:
            self._remove_report(report)

        logger.info(
            "Gitleaks execution tracked",
            extra={"scan_status": record.scan_status.value, "tracker": str(self.tracker_path)},
        )
        return record

    def _annotate(self, commit_msg_path: Path | None, commit_source: str | None, timestamp: str) -> None:
        try:
            changed = annotate_commit_message(commit_msg_path, commit_source, timestamp)
        except OSError as exc:
            logger.warning(
                "Unable to annotate commit message",
                extra={"path": str(commit_msg_path), "error": str(exc)},
            )
            return
        if changed:
            logger.debug("Commit message annotated", extra={"path": str(commit_msg_path)})

    def _stage(self) -> None:
        try:
            self._context.stage(self.tracker_path)
        except GitLookupError as exc:
            logger.warning(
                "Unable to stage tracker file",
                extra={"tracker": str(self.tracker_path), "error": str(exc)},
            )

    def _remove_report(self, report: Path) -> None:
        try:
            report.unlink(missing_ok=True)
        except OSError as exc:
            logger.error(
                "Unable to remove Gitleaks report",
                extra={"report": str(report), "error": str(exc)},
            )


__all__ = ["ExecutionTracker"]
