"""Tree placement engine."""

from .engine import PlacementKind, PlacementRule, PlacementResult, place
from .limits import GrowthLimits

__all__ = ["PlacementKind", "PlacementRule", "PlacementResult", "place", "GrowthLimits"]
