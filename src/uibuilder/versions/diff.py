"""Line diff between two code snapshots.

Longest-common-subsequence table filled from the end; when dropping a line
from either side is equally good, the line from the first text is reported
as removed before the second text's line is reported as added.
"""

from typing import Literal

from uibuilder.schema import WireModel

DiffKind = Literal["same", "added", "removed"]


class DiffLine(WireModel):
    kind: DiffKind
    text: str


class DiffSummary(WireModel):
    same: int = 0
    added: int = 0
    removed: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


class VersionDiff(WireModel):
    """Diff of two stored versions' code."""

    from_version_id: str
    to_version_id: str
    lines: list[DiffLine]
    summary: DiffSummary
    plan_changed: bool


def diff_lines(source: str, target: str) -> list[DiffLine]:
    """
    Edit script turning ``source`` into ``target``, line by line.

    Examples:
        >>> [(d.kind, d.text) for d in diff_lines("a\\nb", "a\\nc")]
        [('same', 'a'), ('removed', 'b'), ('added', 'c')]
    """
    a = source.split("\n")
    b = target.split("\n")
    m, n = len(a), len(b)

    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m - 1, -1, -1):
        for j in range(n - 1, -1, -1):
            if a[i] == b[j]:
                dp[i][j] = dp[i + 1][j + 1] + 1
            else:
                dp[i][j] = max(dp[i + 1][j], dp[i][j + 1])

    out: list[DiffLine] = []
    i = j = 0
    while i < m and j < n:
        if a[i] == b[j]:
            out.append(DiffLine(kind="same", text=a[i]))
            i += 1
            j += 1
        elif dp[i + 1][j] >= dp[i][j + 1]:
            out.append(DiffLine(kind="removed", text=a[i]))
            i += 1
        else:
            out.append(DiffLine(kind="added", text=b[j]))
            j += 1

    out.extend(DiffLine(kind="removed", text=line) for line in a[i:])
    out.extend(DiffLine(kind="added", text=line) for line in b[j:])
    return out


def reconstruct(diff: list[DiffLine], side: Literal["source", "target"]) -> str:
    """Rebuild one of the two inputs from an edit script."""
    skip = "added" if side == "source" else "removed"
    return "\n".join(line.text for line in diff if line.kind != skip)


def summarize(diff: list[DiffLine]) -> DiffSummary:
    counts = {"same": 0, "added": 0, "removed": 0}
    for line in diff:
        counts[line.kind] += 1
    return DiffSummary(**counts)


__all__ = ["DiffKind", "DiffLine", "DiffSummary", "VersionDiff", "diff_lines", "reconstruct", "summarize"]
