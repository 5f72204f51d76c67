"""Best-effort version probes for the external tools around the hook."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

from .git.utils import sanitize_environment

_GO_VERSION_RE = re.compile(r"go(\d+\.\d+(?:\.\d+)?)")


class VersionProbe(Protocol):
    """Reports the version string of one external tool, if it can."""

    name: str

    def probe(self) -> str | None:
        ...


class CommandVersionProbe:
    """Run a version command and keep the first non-empty line of its output."""

    def __init__(self, name: str, command: Sequence[str], *, timeout: float = 10.0) -> None:
        if not command:
            raise ValueError("Version probe command must not be empty")
        self.name = name
        self._command = tuple(command)
        self._timeout = timeout

    @property
    def command(self) -> tuple[str, ...]:
        return self._command

    def probe(self) -> str | None:
        try:
            process = subprocess.run(
                list(self._command),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
                env=sanitize_environment(),
            )
        except (OSError, subprocess.TimeoutExpired):
            return None
        if process.returncode != 0:
            return None
        for line in process.stdout.splitlines():
            stripped = line.strip()
            if stripped:
                return stripped
        return None


@dataclass
class FakeVersionProbe:
    """Test double returning a fixed version."""

    name: str
    version: str | None = None
    calls: int = 0

    def probe(self) -> str | None:
        self.calls += 1
        return self.version


def default_probes(timeout: float = 10.0) -> list[CommandVersionProbe]:
    """Probes recorded in the tracker file when a scan completed."""

    return [
        CommandVersionProbe("pre_commit", ["pre-commit", "--version"], timeout=timeout),
        CommandVersionProbe("gitleaks", ["gitleaks", "version"], timeout=timeout),
    ]


def collect_versions(probes: Iterable[VersionProbe], *, fallback: str) -> dict[str, str]:
    """Map each probe name to its version, substituting ``fallback`` for failures."""

    versions: dict[str, str] = {}
    for probe in probes:
        versions[probe.name] = probe.probe() or fallback
    return versions


def _version_parts(version: str) -> list[int]:
    parts: list[int] = []
    for piece in version.strip().lstrip("v").split("."):
        digits = re.match(r"\d+", piece)
        parts.append(int(digits.group(0)) if digits else 0)
    return parts


def compare_versions(left: str, right: str) -> int:
    """Compare dotted versions; return -1, 0 or 1.

    Missing components count as zero, so ``1.19`` equals ``1.19.0``.
    """

    left_parts = _version_parts(left)
    right_parts = _version_parts(right)
    width = max(len(left_parts), len(right_parts))
    left_parts += [0] * (width - len(left_parts))
    right_parts += [0] * (width - len(right_parts))
    if left_parts < right_parts:
        return -1
    if left_parts > right_parts:
        return 1
    return 0


def extract_go_version(text: str | None) -> str | None:
    """Pull ``X.Y[.Z]`` out of ``go version`` output."""

    if not text:
        return None
    match = _GO_VERSION_RE.search(text)
    return match.group(1) if match else None


__all__ = [
    "CommandVersionProbe",
    "FakeVersionProbe",
    "VersionProbe",
    "collect_versions",
    "compare_versions",
    "default_probes",
    "extract_go_version",
]
