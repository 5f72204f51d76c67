from __future__ import annotations

import argparse
import importlib.util
import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from gitleaks_guard.config import GuardSettings
from gitleaks_guard.git import FakeRepositoryContext
from gitleaks_guard.probes import FakeVersionProbe
from gitleaks_guard.tracking import ScanStatus, TrackingRecord, write_tracker


def _load_module(name: str):
    module_path = Path(__file__).resolve().parents[1] / "scripts" / "gitleaks_guard_diag.py"
    spec = importlib.util.spec_from_file_location(name, module_path)
    assert spec and spec.loader
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _probes(go: str | None = "go version go1.21.5 linux/amd64", gitleaks: str | None = None):
    return {
        "pre_commit": FakeVersionProbe("pre_commit", "pre-commit 3.7.0"),
        "gitleaks": FakeVersionProbe("gitleaks", gitleaks),
        "go": FakeVersionProbe("go", go),
    }


def _settings(tmp_path: Path) -> GuardSettings:
    settings = GuardSettings()
    settings.precommit_config = tmp_path / ".pre-commit-config.yaml"
    return settings


def test_doctor_passes_with_wired_config(tmp_path: Path) -> None:
    diag = _load_module("gitleaks_guard_diag_doctor_ok")
    settings = _settings(tmp_path)
    settings.precommit_config.write_text(
        "repos:\n"
        "  - repo: https://github.com/gitleaks/gitleaks\n"
        "    rev: v8.18.2\n"
        "    hooks:\n"
        "      - id: gitleaks\n"
        "  - repo: local\n"
        "    hooks:\n"
        "      - id: gitleaks-track\n"
        "        entry: gitleaks-track\n"
        "        language: system\n"
        "        stages: [prepare-commit-msg]\n",
        encoding="utf-8",
    )

    report = diag.run_doctor(settings, FakeRepositoryContext(), _probes())

    checks = {check["name"]: check for check in report["checks"]}
    assert report["ok"] is True
    assert checks["go_version"]["detail"] == "go 1.21.5"
    assert checks["gitleaks"]["ok"] is False
    assert checks["gitleaks"]["required"] is False
    assert checks["tracker_hook"]["ok"] is True


def test_doctor_flags_old_go_and_missing_config(tmp_path: Path) -> None:
    diag = _load_module("gitleaks_guard_diag_doctor_fail")
    settings = _settings(tmp_path)

    report = diag.run_doctor(
        settings,
        FakeRepositoryContext(directory=None),
        _probes(go="go version go1.18.3 linux/amd64"),
    )

    checks = {check["name"]: check for check in report["checks"]}
    assert report["ok"] is False
    assert checks["git_repository"]["ok"] is False
    assert checks["go_version"]["ok"] is False
    assert "older than required 1.19.0" in checks["go_version"]["detail"]
    assert checks["precommit_config"]["ok"] is False


def test_doctor_command_exits_nonzero(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    diag = _load_module("gitleaks_guard_diag_doctor_cmd")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(diag, "load_context", lambda _settings: FakeRepositoryContext())
    monkeypatch.setattr(diag, "load_probes", lambda _settings: _probes(go=None))

    with pytest.raises(SystemExit):
        diag.cmd_doctor(argparse.Namespace())

    payload = json.loads(capsys.readouterr().out)
    assert payload["ok"] is False


def test_status_prints_record(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    diag = _load_module("gitleaks_guard_diag_status")
    monkeypatch.chdir(tmp_path)
    write_tracker(
        tmp_path / ".gitleaks-tracker",
        TrackingRecord(
            timestamp=datetime(2025, 1, 1, tzinfo=timezone.utc),
            commit_hash="new-commit",
            branch="main",
            user_email="dev@example.com",
            scan_status=ScanStatus.POSSIBLY_SKIPPED,
            warning="No gitleaks report found",
        ),
    )

    diag.cmd_status(argparse.Namespace(json=False))
    output = capsys.readouterr().out
    assert "[possibly_skipped]" in output
    assert "warning: No gitleaks report found" in output

    diag.cmd_status(argparse.Namespace(json=True))
    payload = json.loads(capsys.readouterr().out)
    assert payload["gitleaks_execution"]["branch"] == "main"


def test_status_missing_tracker(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    diag = _load_module("gitleaks_guard_diag_status_missing")
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit):
        diag.cmd_status(argparse.Namespace(json=False))
    assert "Tracker unavailable" in capsys.readouterr().out


def test_marker_keeps_setup_timestamp(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    diag = _load_module("gitleaks_guard_diag_marker")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        diag,
        "load_context",
        lambda _settings: FakeRepositoryContext(remote="git@github.com:org/payments.git"),
    )
    marker_path = tmp_path / ".repo-protection-config.json"

    diag.cmd_marker(argparse.Namespace())
    first = json.loads(marker_path.read_text(encoding="utf-8"))
    assert first["repository"] == "payments"
    assert first["protection_enabled"] is True

    first["setup_timestamp"] = "2020-01-01T00:00:00Z"
    marker_path.write_text(json.dumps(first), encoding="utf-8")
    diag.cmd_marker(argparse.Namespace())

    second = json.loads(marker_path.read_text(encoding="utf-8"))
    assert second["setup_timestamp"] == "2020-01-01T00:00:00Z"
    capsys.readouterr()


def test_snippet_command(capsys) -> None:
    diag = _load_module("gitleaks_guard_diag_snippet")
    diag.main(["snippet"])
    assert "gitleaks-track" in capsys.readouterr().out
