from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class Session:
    """Score, timer and progression state for the running game.

    ``epoch`` is bumped on every start, restart and level change so deferred
    actions scheduled for an earlier board can recognise they are stale.
    """
    score: int = 0
    high_score: int = 0
    level: int = 1
    target_score: int = 0
    time_left: float = 0.0
    combo_multiplier: float = 1.0
    last_match_time: Optional[float] = None
    level_started_at: Optional[float] = None
    total_games: int = 0
    epoch: int = 0
    end_scheduled: bool = False
