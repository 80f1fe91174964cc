from autoheal.stats.events import EventKind, HealingEvent
from autoheal.stats.learnings import load_learnings, seed_candidates
from autoheal.stats.tracker import HealingStatsTracker

__all__ = [
    "EventKind",
    "HealingEvent",
    "HealingStatsTracker",
    "load_learnings",
    "seed_candidates",
]
