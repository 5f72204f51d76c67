"""Pre-commit configuration models and loader exports."""

from .loader import (
    GITLEAKS_HOOK_ID,
    TRACKER_HOOK_ID,
    TRACKER_STAGE,
    PreCommitConfigError,
    load_precommit_config,
    render_tracker_snippet,
    tracker_hook_definition,
)
from .models import HookEntry, PreCommitConfig, RepoEntry

__all__ = [
    "GITLEAKS_HOOK_ID",
    "HookEntry",
    "PreCommitConfig",
    "PreCommitConfigError",
    "RepoEntry",
    "TRACKER_HOOK_ID",
    "TRACKER_STAGE",
    "load_precommit_config",
    "render_tracker_snippet",
    "tracker_hook_definition",
]
