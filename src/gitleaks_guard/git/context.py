"""Read ambient repository state through the git CLI."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Protocol

from .utils import sanitize_environment


class GitLookupError(LookupError):
    """Raised when a repository lookup cannot be resolved."""


class RepositoryContext(Protocol):
    """Repository state the execution tracker depends on."""

    def head_hash(self) -> str:
        ...

    def current_branch(self) -> str:
        ...

    def user_email(self) -> str:
        ...

    def remote_url(self) -> str:
        ...

    def git_dir(self) -> str:
        ...

    def stage(self, path: Path) -> None:
        ...


@dataclass(slots=True)
class GitCommandResult:
    """Holds the outcome of a git invocation."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GitRepositoryContext:
    """Resolve repository state by running git synchronously."""

    def __init__(
        self,
        executable: Path | str | None = None,
        *,
        cwd: Path | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._executable_path = self._resolve_executable(executable)
        self._cwd = Path(cwd) if cwd is not None else None
        self._timeout = timeout

    @staticmethod
    def _resolve_executable(explicit: Path | str | None) -> Path | None:
        if explicit is not None:
            candidate = Path(explicit)
            if candidate.exists() and candidate.is_file():
                return candidate
            return None

        binary = shutil.which("git")
        return Path(binary) if binary is not None else None

    @property
    def executable(self) -> Path | None:
        return self._executable_path

    def head_hash(self) -> str:
        return self._value("rev-parse", "HEAD", what="HEAD")

    def current_branch(self) -> str:
        # Detached HEAD prints nothing and exits 0.
        return self._value("branch", "--show-current", what="current branch")

    def user_email(self) -> str:
        return self._value("config", "user.email", what="user.email")

    def remote_url(self) -> str:
        return self._value("config", "--get", "remote.origin.url", what="remote.origin.url")

    def git_dir(self) -> str:
        return self._value("rev-parse", "--git-dir", what="git directory")

    def stage(self, path: Path) -> None:
        result = self._invoke("add", "--", str(path))
        if not result.ok:
            raise GitLookupError(f"git add {path} failed: {result.stderr.strip() or result.returncode}")

    def _value(self, *args: str, what: str) -> str:
        result = self._invoke(*args)
        if not result.ok:
            raise GitLookupError(f"Unable to resolve {what}: {result.stderr.strip() or result.returncode}")
        value = result.stdout.strip()
        if not value:
            raise GitLookupError(f"Unable to resolve {what}: empty output")
        return value

    def _invoke(self, *args: str) -> GitCommandResult:
        if self._executable_path is None:
            raise GitLookupError("git executable not found")

        cmd = [str(self._executable_path), *args]
        try:
            process = subprocess.run(
                cmd,
                cwd=str(self._cwd) if self._cwd is not None else None,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
                env=sanitize_environment(),
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise GitLookupError(f"git {' '.join(args)} could not run: {exc}") from exc
        return GitCommandResult(
            args=tuple(cmd),
            returncode=process.returncode,
            stdout=process.stdout,
            stderr=process.stderr,
        )


@dataclass
class FakeRepositoryContext:
    """Test double that serves canned repository values.

    A value of ``None`` makes the matching lookup raise ``GitLookupError``.
    """

    head: str | None = "0123456789abcdef0123456789abcdef01234567"
    branch: str | None = "main"
    email: str | None = "dev@example.com"
    remote: str | None = None
    directory: str | None = ".git"
    stage_fails: bool = False
    staged: list[Path] = field(default_factory=list)

    def head_hash(self) -> str:
        return self._require(self.head, "HEAD")

    def current_branch(self) -> str:
        return self._require(self.branch, "current branch")

    def user_email(self) -> str:
        return self._require(self.email, "user.email")

    def remote_url(self) -> str:
        return self._require(self.remote, "remote.origin.url")

    def git_dir(self) -> str:
        return self._require(self.directory, "git directory")

    def stage(self, path: Path) -> None:
        if self.stage_fails:
            raise GitLookupError(f"git add {path} failed")
        self.staged.append(Path(path))

    @staticmethod
    def _require(value: str | None, what: str) -> str:
        if not value:
            raise GitLookupError(f"Unable to resolve {what}")
        return value


def resolve_or(lookup: Callable[[], str], sentinel: str) -> str:
    """Return ``lookup()`` or ``sentinel`` when the lookup fails."""

    try:
        return lookup()
    except GitLookupError:
        return sentinel
