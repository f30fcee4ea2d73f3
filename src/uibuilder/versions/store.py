"""Append-only version history.

One ``VersionStore`` lives for the whole process: the DI container creates it
once and hands the same instance to every request. Appends take a lock;
reads use whatever immutable tuple is current and never block, so a reader
always sees a consistent prefix of the history.
"""

import threading
from datetime import datetime, timezone

from pydantic import Field

from uibuilder.core import GenerationAction, VersionNotFoundError, get_logger
from uibuilder.core.id import new_version_id
from uibuilder.schema import StaticAnalysisReport, UIPlan, WireModel

logger = get_logger(__name__)


class SnapshotDraft(WireModel):
    """Everything a snapshot records except its identity."""

    intent: str
    action: GenerationAction
    base_version_id: str | None = None
    plan: UIPlan
    code: str
    explanation: str
    analysis: StaticAnalysisReport


class VersionSnapshot(SnapshotDraft):
    """A committed version. Never modified after it is stored."""

    id: str = Field(min_length=1)
    created_at: str


class VersionStore:
    """
    Thread-safe, process-lifetime snapshot log.

    Examples:
        >>> store = VersionStore()
        >>> store.latest() is None
        True
        >>> len(store)
        0
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._versions: tuple[VersionSnapshot, ...] = ()
        self._index: dict[str, VersionSnapshot] = {}

    def add(self, draft: SnapshotDraft) -> VersionSnapshot:
        """Assign an id and timestamp, then append."""
        fields = {name: getattr(draft, name) for name in SnapshotDraft.model_fields}
        fields["plan"] = draft.plan.model_copy(deep=True)

        with self._lock:
            snapshot = VersionSnapshot(
                **fields,
                id=new_version_id(),
                created_at=datetime.now(timezone.utc).isoformat(),
            )
            index = dict(self._index)
            index[snapshot.id] = snapshot
            # Publish index before the tuple so any id a reader sees is resolvable
            self._index = index
            self._versions = self._versions + (snapshot,)
            count = len(self._versions)

        logger.info("version_added", version_id=snapshot.id, action=snapshot.action, total=count)
        return snapshot

    def get(self, version_id: str) -> VersionSnapshot | None:
        return self._index.get(version_id)

    def require(self, version_id: str) -> VersionSnapshot:
        """
        Like ``get`` but raises for unknown ids.

        Raises:
            VersionNotFoundError: No snapshot with this id
        """
        snapshot = self.get(version_id)
        if snapshot is None:
            raise VersionNotFoundError(version_id)
        return snapshot

    def latest(self) -> VersionSnapshot | None:
        versions = self._versions
        return versions[-1] if versions else None

    def list(self) -> list[VersionSnapshot]:
        """All snapshots, newest first."""
        return list(reversed(self._versions))

    def rollback(self, version_id: str) -> VersionSnapshot | None:
        """Look up a snapshot to restore. Read-only: nothing is appended or removed."""
        return self.get(version_id)

    def __len__(self) -> int:
        return len(self._versions)


__all__ = ["SnapshotDraft", "VersionSnapshot", "VersionStore"]
