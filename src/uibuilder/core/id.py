"""ID Generation.

ULID-based identifiers with type prefixes (``ver_*``, ``req_*``).
ULIDs are lexicographically sortable by creation time, which keeps version
ids monotonic for a single process.
"""

from typing import NewType
from ulid import ULID

VersionID = NewType("VersionID", str)
"""Version snapshot identifier"""

RequestID = NewType("RequestID", str)
"""Pipeline request identifier"""


class Prefix:
    """ID prefix constants."""

    VERSION = "ver"
    REQUEST = "req"


def _generate_with_prefix(prefix: str) -> str:
    return f"{prefix}_{ULID()}"


def new_version_id() -> VersionID:
    """Generate new version ID."""
    return VersionID(_generate_with_prefix(Prefix.VERSION))


def new_request_id() -> RequestID:
    """Generate new request ID."""
    return RequestID(_generate_with_prefix(Prefix.REQUEST))


__all__ = [
    "VersionID",
    "RequestID",
    "Prefix",
    "new_version_id",
    "new_request_id",
]
