"""Utility helpers for git and tool subprocesses."""

from __future__ import annotations

import os
from typing import Mapping

_SANITIZED_VARS = {
    "GIT_PAGER",
    "PAGER",
    "GIT_TRACE",
    "GIT_EXTERNAL_DIFF",
}

_FORCED_VARS = {
    "LC_ALL": "C",
    "GIT_TERMINAL_PROMPT": "0",
}


def sanitize_environment(additional: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return a sanitized environment suitable for subprocess execution.

    Variables git exports to hooks (``GIT_DIR``, ``GIT_INDEX_FILE``) are kept so
    that commands run against the index of the in-flight commit.
    """

    env = dict(os.environ)
    for key in _SANITIZED_VARS:
        env.pop(key, None)
    env.update(_FORCED_VARS)
    if additional:
        env.update(additional)
    return env
