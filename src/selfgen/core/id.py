"""ID Generation.

ULID-based ids for generated nodes, fallback fragments and generation runs.

- K-sortable: ids created later sort later
- Prefixed: node_*, fallback-*, gen_* make logs readable
"""

from datetime import datetime
from typing import NewType
from ulid import ULID

NodeID = NewType("NodeID", str)
"""Component node identifier"""

GenerationID = NewType("GenerationID", str)
"""Pipeline run / fallback trigger identifier"""


class Prefix:
    """ID prefix constants."""

    NODE = "node"
    FALLBACK = "fallback"
    GENERATION = "gen"


def _ulid() -> str:
    return str(ULID())


def new_node_id() -> NodeID:
    """Generate id for a node that arrived without one."""
    return NodeID(f"{Prefix.NODE}_{_ulid()}")


def new_fallback_id() -> NodeID:
    """Generate id for a diagnostic fallback card."""
    return NodeID(f"{Prefix.FALLBACK}-{_ulid()}")


def new_generation_id() -> GenerationID:
    """Generate id for a generation run."""
    return GenerationID(f"{Prefix.GENERATION}_{_ulid()}")


def short_suffix() -> str:
    """Short random suffix used when renaming colliding node ids."""
    return _ulid()[-6:].lower()


def extract_timestamp(id_str: str) -> datetime | None:
    """Extract creation time from a (possibly prefixed) ULID id."""
    ulid_part = id_str.rsplit("_", 1)[-1].rsplit("-", 1)[-1]
    try:
        return ULID.from_str(ulid_part).datetime
    except ValueError:
        return None
