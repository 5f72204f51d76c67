"""gitleaks-guard diagnostics CLI."""

from __future__ import annotations

import argparse
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from gitleaks_guard.config import UNKNOWN, GuardSettings
from gitleaks_guard.git import GitRepositoryContext, RepositoryContext, resolve_or
from gitleaks_guard.precommit import (
    GITLEAKS_HOOK_ID,
    TRACKER_HOOK_ID,
    TRACKER_STAGE,
    PreCommitConfigError,
    load_precommit_config,
    render_tracker_snippet,
)
from gitleaks_guard.probes import (
    CommandVersionProbe,
    VersionProbe,
    compare_versions,
    extract_go_version,
)
from gitleaks_guard.tracking import (
    MarkerError,
    ProtectionMarker,
    TrackerReadError,
    format_timestamp,
    read_protection_marker,
    read_tracker,
    repository_name,
    write_protection_marker,
)


def load_context(settings: GuardSettings) -> RepositoryContext:
    return GitRepositoryContext(
        Path(settings.git_path) if settings.git_path else None,
        timeout=settings.command_timeout,
    )


def load_probes(settings: GuardSettings) -> dict[str, VersionProbe]:
    timeout = settings.command_timeout
    return {
        "pre_commit": CommandVersionProbe("pre_commit", ["pre-commit", "--version"], timeout=timeout),
        "gitleaks": CommandVersionProbe("gitleaks", ["gitleaks", "version"], timeout=timeout),
        "go": CommandVersionProbe("go", ["go", "version"], timeout=timeout),
    }


def _check(name: str, ok: bool, detail: str, *, required: bool = True) -> dict[str, Any]:
    return {"name": name, "ok": ok, "required": required, "detail": detail}


def run_doctor(
    settings: GuardSettings,
    context: RepositoryContext,
    probes: Mapping[str, VersionProbe],
) -> dict[str, Any]:
    checks: list[dict[str, Any]] = []

    git_dir = resolve_or(context.git_dir, "")
    checks.append(
        _check("git_repository", bool(git_dir), git_dir or "This is not a Git repository")
    )

    pre_commit_version = probes["pre_commit"].probe()
    checks.append(
        _check("pre_commit", pre_commit_version is not None, pre_commit_version or "pre-commit not found on PATH")
    )

    gitleaks_version = probes["gitleaks"].probe()
    checks.append(
        _check(
            "gitleaks",
            gitleaks_version is not None,
            gitleaks_version or "gitleaks not on PATH; pre-commit installs it on first run",
            required=False,
        )
    )

    go_version = extract_go_version(probes["go"].probe())
    minimum = settings.min_go_version
    if go_version is None:
        checks.append(_check("go_version", False, "Go is required for Gitleaks but not installed"))
    else:
        go_ok = compare_versions(go_version, minimum) >= 0
        detail = f"go {go_version}" if go_ok else f"go {go_version} is older than required {minimum}"
        checks.append(_check("go_version", go_ok, detail))

    try:
        config = load_precommit_config(settings.precommit_config)
    except PreCommitConfigError as exc:
        checks.append(_check("precommit_config", False, str(exc)))
    else:
        checks.append(_check("precommit_config", True, str(settings.precommit_config)))
        checks.append(
            _check(
                "gitleaks_hook",
                config.has_hook(GITLEAKS_HOOK_ID),
                f"hook '{GITLEAKS_HOOK_ID}' declared" if config.has_hook(GITLEAKS_HOOK_ID)
                else f"hook '{GITLEAKS_HOOK_ID}' missing",
            )
        )
        tracker_wired = TRACKER_STAGE in config.hook_stages(TRACKER_HOOK_ID)
        checks.append(
            _check(
                "tracker_hook",
                tracker_wired,
                f"hook '{TRACKER_HOOK_ID}' runs at {TRACKER_STAGE}" if tracker_wired
                else f"hook '{TRACKER_HOOK_ID}' not bound to {TRACKER_STAGE}",
            )
        )

    ok = all(check["ok"] for check in checks if check["required"])
    return {"ok": ok, "checks": checks}


def cmd_status(args: argparse.Namespace) -> None:
    settings = GuardSettings()
    try:
        record = read_tracker(settings.tracker_file)
    except TrackerReadError as exc:
        print(f"Tracker unavailable: {exc}")
        raise SystemExit(1)
    if args.json:
        print(json.dumps(record.to_document(), indent=2, ensure_ascii=False))
    else:
        print(
            f"{format_timestamp(record.timestamp)} [{record.scan_status.value}] "
            f"{record.branch}@{record.commit_hash} by {record.user_email}"
        )
        if record.warning:
            print(f"warning: {record.warning}")


def cmd_doctor(args: argparse.Namespace) -> None:
    settings = GuardSettings()
    report = run_doctor(settings, load_context(settings), load_probes(settings))
    print(json.dumps(report, indent=2))
    if not report["ok"]:
        raise SystemExit(1)


def cmd_marker(args: argparse.Namespace) -> None:
    settings = GuardSettings()
    context = load_context(settings)
    now = format_timestamp(datetime.now(timezone.utc))
    try:
        existing = read_protection_marker(settings.protection_marker_file)
    except MarkerError as exc:
        print(f"Protection marker unavailable: {exc}")
        raise SystemExit(1)

    marker = ProtectionMarker(
        setup_timestamp=existing.setup_timestamp if existing else now,
        repository=repository_name(resolve_or(context.remote_url, UNKNOWN)),
        last_updated=now,
    )
    try:
        path = write_protection_marker(settings.protection_marker_file, marker)
    except MarkerError as exc:
        print(f"Protection marker unavailable: {exc}")
        raise SystemExit(1)
    print(json.dumps({"path": str(path), "marker": marker.model_dump(mode="json")}, indent=2))


def cmd_snippet(args: argparse.Namespace) -> None:
    print(render_tracker_snippet(), end="")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="gitleaks-guard diagnostics")
    sub = parser.add_subparsers(dest="cmd")

    p_status = sub.add_parser("status", help="Show the last tracking record")
    p_status.add_argument("--json", action="store_true", help="Output JSON")
    p_status.set_defaults(func=cmd_status)

    p_doctor = sub.add_parser("doctor", help="Check repository, tools and pre-commit wiring")
    p_doctor.set_defaults(func=cmd_doctor)

    p_marker = sub.add_parser("marker", help="Write or refresh the repository protection marker")
    p_marker.set_defaults(func=cmd_marker)

    p_snippet = sub.add_parser("snippet", help="Print the pre-commit config wiring the tracker hook")
    p_snippet.set_defaults(func=cmd_snippet)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return
    args.func(args)


if __name__ == "__main__":
    main()
