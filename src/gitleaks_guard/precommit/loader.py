"""Load and render pre-commit configuration."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import PreCommitConfig

TRACKER_HOOK_ID = "gitleaks-track"
GITLEAKS_HOOK_ID = "gitleaks"
TRACKER_STAGE = "prepare-commit-msg"


class PreCommitConfigError(RuntimeError):
    """Raised when the pre-commit configuration cannot be loaded."""


def load_precommit_config(path: Path) -> PreCommitConfig:
    """Parse ``path`` into a ``PreCommitConfig``."""

    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise PreCommitConfigError(f"Pre-commit config {path} does not exist") from exc
    except OSError as exc:
        raise PreCommitConfigError(f"Unable to read {path}: {exc}") from exc

    try:
        document = yaml.safe_load(raw)
    except yaml.YAMLError as exc:  # pragma: no cover - library type
        raise PreCommitConfigError(f"Failed to parse YAML in {path}: {exc}") from exc

    if document is None:
        return PreCommitConfig()

    try:
        return PreCommitConfig.model_validate(document)
    except ValidationError as exc:
        raise PreCommitConfigError(f"Pre-commit config validation error in {path}: {exc}") from exc


def tracker_hook_definition() -> dict[str, object]:
    """Local repo entry that runs the execution tracker."""

    return {
        "repo": "local",
        "hooks": [
            {
                "id": TRACKER_HOOK_ID,
                "name": "Track Gitleaks execution",
                "entry": "gitleaks-track",
                "language": "system",
                "stages": [TRACKER_STAGE],
                "always_run": True,
            }
        ],
    }


def render_tracker_snippet() -> str:
    """YAML for the ``repos`` list item wiring the tracker into pre-commit."""

    return yaml.safe_dump(
        {
            "default_install_hook_types": ["pre-commit", TRACKER_STAGE],
            "repos": [tracker_hook_definition()],
        },
        sort_keys=False,
    )


__all__ = [
    "GITLEAKS_HOOK_ID",
    "PreCommitConfigError",
    "TRACKER_HOOK_ID",
    "TRACKER_STAGE",
    "load_precommit_config",
    "render_tracker_snippet",
    "tracker_hook_definition",
]
