"""Error-driven component repair."""

from .fixer import ATTRIBUTE_FIXES, RepairStrategy, RepairWorker, fix_key, quick_fix
from .queue import RepairRequest, RepairQueue

__all__ = [
    "ATTRIBUTE_FIXES",
    "RepairStrategy",
    "RepairWorker",
    "fix_key",
    "quick_fix",
    "RepairRequest",
    "RepairQueue",
]
