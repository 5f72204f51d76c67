"""Console entry points run by git as commit-message hooks."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from . import __version__
from .annotation import append_verification_line
from .config import GuardSettings, get_settings
from .git import GitRepositoryContext
from .probes import default_probes
from .tracker import ExecutionTracker
from .tracking import TrackerWriteError

# pre-commit passes only the message file and exports the rest.
_PRE_COMMIT_SOURCE_VAR = "PRE_COMMIT_COMMIT_MSG_SOURCE"

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging for the hook process."""

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


def build_tracker(settings: GuardSettings, root: Path | None = None) -> ExecutionTracker:
    context = GitRepositoryContext(
        Path(settings.git_path) if settings.git_path else None,
        cwd=root,
        timeout=settings.command_timeout,
    )
    return ExecutionTracker(
        settings,
        context,
        probes=default_probes(timeout=settings.command_timeout),
        root=root,
    )


def build_track_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitleaks-track",
        description="prepare-commit-msg hook recording whether Gitleaks ran for this commit",
    )
    parser.add_argument("commit_msg_file", nargs="?", default=None, help="Path to the commit message file")
    parser.add_argument(
        "commit_source",
        nargs="?",
        default=None,
        help="Commit source reported by git (message, template, merge, squash, commit)",
    )
    parser.add_argument("commit_sha", nargs="?", default=None, help="Commit object name, if any")
    parser.add_argument("--report", default=None, help="Override the Gitleaks report path")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run_track(args: argparse.Namespace, *, tracker: ExecutionTracker | None = None) -> int:
    if tracker is None:
        tracker = build_tracker(get_settings())

    commit_source = args.commit_source
    if commit_source is None:
        commit_source = os.environ.get(_PRE_COMMIT_SOURCE_VAR) or None

    commit_msg = Path(args.commit_msg_file) if args.commit_msg_file else None
    report = Path(args.report) if args.report else None
    try:
        tracker.track(commit_msg, commit_source, report)
    except TrackerWriteError as exc:
        logger.error("Gitleaks execution tracking failed: %s", exc)
        return 1
    return 0


def main(argv: list[str] | None = None) -> None:
    """Entry point for ``gitleaks-track``."""

    settings = get_settings()
    configure_logging(settings.log_level)
    parser = build_track_parser()
    args = parser.parse_args(argv)
    exit_code = run_track(args)
    if exit_code:
        raise SystemExit(exit_code)


def verify_main(argv: list[str] | None = None) -> None:
    """Entry point for ``gitleaks-verify``: append the plain scan-passed line."""

    settings = get_settings()
    configure_logging(settings.log_level)
    parser = argparse.ArgumentParser(
        prog="gitleaks-verify",
        description="Append the Gitleaks verification line to a commit message",
    )
    parser.add_argument("commit_msg_file", nargs="?", default=None)
    parser.add_argument("rest", nargs="*", help=argparse.SUPPRESS)
    args = parser.parse_args(argv)

    path = Path(args.commit_msg_file) if args.commit_msg_file else None
    try:
        appended = append_verification_line(path)
    except OSError as exc:
        logger.error("Unable to update commit message: %s", exc)
        raise SystemExit(1)
    if appended:
        logger.debug("Verification line appended", extra={"path": str(path)})


if __name__ == "__main__":
    main()
