from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from esper import World

from blast.events.bus import (
    EVENT_ACHIEVEMENT_UNLOCKED,
    EVENT_MATCH_FOUND,
    EVENT_SCORE_CHANGED,
    EventBus,
)
from blast.utils.resources import get_progress_tracker, get_session


@dataclass(frozen=True)
class AchievementSpec:
    id: str
    name: str
    description: str


ACHIEVEMENTS: Mapping[str, AchievementSpec] = {
    "quick_thinker": AchievementSpec(
        id="quick_thinker",
        name="Quick Thinker",
        description="Clear a chain within 3 seconds",
    ),
    "chain_master": AchievementSpec(
        id="chain_master",
        name="Chain Master",
        description="Clear a chain of 6 or more blocks",
    ),
    "high_scorer": AchievementSpec(
        id="high_scorer",
        name="High Scorer",
        description="Reach 10000 points",
    ),
}

QUICK_THINKER_WINDOW = 3.0
CHAIN_MASTER_SIZE = 6
HIGH_SCORER_SCORE = 10000


class AchievementSystem:
    """Unlocks one-off achievements from match and score events."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        # Reference point for quick_thinker: level start or the previous match.
        self._last_match_at: float | None = None
        self.event_bus.subscribe(EVENT_MATCH_FOUND, self._on_match_found)
        self.event_bus.subscribe(EVENT_SCORE_CHANGED, self._on_score_changed)

    def _on_match_found(self, sender, **payload) -> None:
        size = payload.get("size") or 0
        now = self.world.clock()
        session = get_session(self.world)
        reference = self._last_match_at
        if reference is None or (session.level_started_at is not None and session.level_started_at > reference):
            reference = session.level_started_at
        self._last_match_at = now
        if reference is not None and now - reference <= QUICK_THINKER_WINDOW:
            self.unlock("quick_thinker")
        if size >= CHAIN_MASTER_SIZE:
            self.unlock("chain_master")

    def _on_score_changed(self, sender, **payload) -> None:
        if (payload.get("score") or 0) >= HIGH_SCORER_SCORE:
            self.unlock("high_scorer")

    def unlock(self, achievement_id: str) -> bool:
        spec = ACHIEVEMENTS.get(achievement_id)
        if spec is None:
            raise ValueError(f"Unknown achievement: {achievement_id!r}")
        tracker = get_progress_tracker(self.world)
        if achievement_id in tracker.achievements:
            return False
        tracker.achievements.add(achievement_id)
        self.event_bus.emit(EVENT_ACHIEVEMENT_UNLOCKED, achievement_id=spec.id, name=spec.name)
        return True
