"""Version history and code diffs."""

from .store import SnapshotDraft, VersionSnapshot, VersionStore
from .diff import DiffLine, DiffSummary, VersionDiff, diff_lines, reconstruct, summarize

__all__ = [
    "SnapshotDraft",
    "VersionSnapshot",
    "VersionStore",
    "DiffLine",
    "DiffSummary",
    "VersionDiff",
    "diff_lines",
    "reconstruct",
    "summarize",
]
