from __future__ import annotations

import logging

from esper import World

from blast.components.game_state import GameMode
from blast.components.progress_tracker import ProgressTracker
from blast.constants import SYNC_INTERVAL
from blast.events.bus import (
    EVENT_ACHIEVEMENT_UNLOCKED,
    EVENT_GAME_OVER,
    EVENT_LEVEL_ADVANCED,
    EVENT_PROGRESS_SAVED,
    EVENT_TICK,
    EventBus,
)
from blast.utils.game_state import current_mode
from blast.utils.progress_store import (
    JsonProgressStore,
    ProgressSnapshot,
    ProgressStore,
    append_score,
    default_save_path,
    merge_progress,
)
from blast.utils.resources import get_progress_tracker, get_session

logger = logging.getLogger(__name__)

# Errors a store may raise for unreadable, unwritable or malformed data.
STORE_ERRORS = (OSError, ValueError, TypeError)


class ProgressSystem:
    """Tracks and persists long-term progress across games.

    Persistence is best effort: every failure is logged and play continues on
    the in-memory values.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        store: ProgressStore | None = None,
        remote: ProgressStore | None = None,
        load_existing: bool = True,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.store: ProgressStore = store if store is not None else JsonProgressStore(default_save_path())
        self.remote = remote
        self._sync_elapsed = 0.0

        self.event_bus.subscribe(EVENT_GAME_OVER, self._on_game_over)
        self.event_bus.subscribe(EVENT_LEVEL_ADVANCED, self._on_level_advanced)
        self.event_bus.subscribe(EVENT_ACHIEVEMENT_UNLOCKED, self._on_achievement_unlocked)
        self.event_bus.subscribe(EVENT_TICK, self._on_tick)

        if load_existing:
            self.load_progress()

    def _tracker(self) -> ProgressTracker:
        return get_progress_tracker(self.world)

    def snapshot(self) -> ProgressSnapshot:
        tracker = self._tracker()
        return ProgressSnapshot(
            high_score=tracker.high_score,
            max_level=tracker.max_level,
            total_games=tracker.total_games,
            recent_scores=tuple(tracker.recent_scores),
            achievements=tuple(sorted(tracker.achievements)),
        )

    def apply_snapshot(self, snapshot: ProgressSnapshot) -> None:
        tracker = self._tracker()
        tracker.high_score = snapshot.high_score
        tracker.max_level = snapshot.max_level
        tracker.total_games = snapshot.total_games
        tracker.recent_scores = list(snapshot.recent_scores)
        tracker.achievements = set(snapshot.achievements)
        session = get_session(self.world)
        session.high_score = max(session.high_score, snapshot.high_score)
        session.total_games = max(session.total_games, snapshot.total_games)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load_progress(self) -> bool:
        try:
            snapshot = self.store.load()
        except STORE_ERRORS:
            logger.exception("Could not load progress, starting from a clean slate")
            return False
        if snapshot is None:
            return False
        self.apply_snapshot(snapshot)
        return True

    def save_progress(self) -> bool:
        snapshot = self.snapshot()
        try:
            self.store.save(snapshot)
        except STORE_ERRORS:
            logger.exception("Could not save progress")
            return False
        self.event_bus.emit(EVENT_PROGRESS_SAVED, snapshot=snapshot)
        return True

    def sync(self, remote: ProgressStore | None = None) -> bool:
        """Merge local progress with a secondary store and write the result to both."""
        target = remote if remote is not None else self.remote
        if target is None:
            return False
        try:
            theirs = target.load()
        except STORE_ERRORS:
            logger.warning("Progress sync failed while loading the remote copy", exc_info=True)
            return False
        merged = self.snapshot() if theirs is None else merge_progress(self.snapshot(), theirs)
        self.apply_snapshot(merged)
        try:
            target.save(merged)
        except STORE_ERRORS:
            logger.warning("Progress sync failed while saving the remote copy", exc_info=True)
            self.save_progress()
            return False
        return self.save_progress()

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_game_over(self, sender, **payload) -> None:
        tracker = self._tracker()
        score = int(payload.get("score", 0))
        level = int(payload.get("level", 1))
        tracker.total_games += 1
        tracker.recent_scores = list(append_score(tracker.recent_scores, score))
        if score > tracker.high_score:
            tracker.high_score = score
            tracker.max_level = max(tracker.max_level, level)
        self.save_progress()
        if self.remote is not None:
            self.sync()

    def _on_level_advanced(self, sender, **payload) -> None:
        tracker = self._tracker()
        level = int(payload.get("level", 1))
        if level <= tracker.max_level:
            return
        tracker.max_level = level
        self.save_progress()

    def _on_achievement_unlocked(self, sender, **payload) -> None:
        achievement_id = payload.get("achievement_id")
        if not achievement_id:
            return
        self._tracker().achievements.add(achievement_id)
        self.save_progress()

    def _on_tick(self, sender, **payload) -> None:
        if self.remote is None or current_mode(self.world) != GameMode.PLAYING:
            return
        self._sync_elapsed += payload.get("dt", 0.0) or 0.0
        if self._sync_elapsed < SYNC_INTERVAL:
            return
        self._sync_elapsed = 0.0
        self.sync()
