"""Commit message annotation helpers."""

from __future__ import annotations

from pathlib import Path

from .config import EXCLUDED_COMMIT_SOURCES, MARKER_TOKEN, SIGNED_OFF_LINE, VERIFICATION_LINE


def message_already_annotated(text: str) -> bool:
    """Return True when the marker token appears anywhere in ``text``."""

    return MARKER_TOKEN in text


def marker_line(timestamp: str) -> str:
    return f"<!-- {MARKER_TOKEN}: {timestamp} -->"


def render_annotation(timestamp: str) -> str:
    """Block appended to the message: blank line, marker, signed-off line."""

    return "\n".join(["", marker_line(timestamp), SIGNED_OFF_LINE]) + "\n"


def should_annotate(commit_source: str | None) -> bool:
    return (commit_source or "").strip() not in EXCLUDED_COMMIT_SOURCES


def _append(path: Path, raw: bytes, block: str) -> None:
    # Messages may use a non-UTF-8 i18n.commitEncoding; work on the raw bytes.
    prefix = b"" if not raw or raw.endswith(b"\n") else b"\n"
    with path.open("ab") as handle:
        handle.write(prefix + block.encode("utf-8"))


def annotate_commit_message(path: Path | None, commit_source: str | None, timestamp: str) -> bool:
    """Append the scan annotation to the message at ``path``.

    Returns True when the file was changed. Merge and squash messages, missing
    files and already annotated messages are left alone.
    """

    if path is None or not should_annotate(commit_source):
        return False
    path = Path(path)
    if not path.is_file():
        return False

    raw = path.read_bytes()
    if MARKER_TOKEN.encode("utf-8") in raw:
        return False

    _append(path, raw, render_annotation(timestamp))
    return True


def append_verification_line(path: Path | None) -> bool:
    """Append the plain "scan passed" line once; return True when appended."""

    if path is None:
        return False
    path = Path(path)
    if not path.is_file():
        return False

    raw = path.read_bytes()
    if VERIFICATION_LINE.encode("utf-8") in raw:
        return False

    _append(path, raw, f"\n{VERIFICATION_LINE}\n")
    return True


__all__ = [
    "annotate_commit_message",
    "append_verification_line",
    "marker_line",
    "message_already_annotated",
    "render_annotation",
    "should_annotate",
]
