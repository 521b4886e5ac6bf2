from __future__ import annotations

from typing import Sequence

from blast.components.level_config import LevelConfig

_LEVEL_TABLE: Sequence[LevelConfig] = (
    LevelConfig(level=1, rows=6, cols=5, color_count=3, target_score=500, time_limit=60),
    LevelConfig(level=2, rows=6, cols=5, color_count=4, target_score=1000, time_limit=60),
    LevelConfig(level=3, rows=7, cols=6, color_count=4, target_score=1500, time_limit=75),
    LevelConfig(level=4, rows=7, cols=6, color_count=5, target_score=2000, time_limit=75),
    LevelConfig(level=5, rows=8, cols=7, color_count=5, target_score=2500, time_limit=90),
    LevelConfig(level=6, rows=8, cols=7, color_count=6, target_score=3000, time_limit=90),
    LevelConfig(level=7, rows=9, cols=8, color_count=6, target_score=3500, time_limit=105),
    LevelConfig(level=8, rows=9, cols=8, color_count=7, target_score=4000, time_limit=105),
    LevelConfig(level=9, rows=10, cols=9, color_count=7, target_score=4500, time_limit=120),
    LevelConfig(level=10, rows=10, cols=9, color_count=8, target_score=5000, time_limit=120),
)

MAX_ROWS = 12
MAX_COLS = 10
MAX_COLORS = 8
MAX_TIME_LIMIT = 180
TARGET_STEP = 500
TIME_STEP = 5


def get_level_config(level: int) -> LevelConfig:
    """Return the configuration for ``level``, extrapolating past the table.

    Board size grows every 2 levels and the palette every 3 levels beyond the
    last tier, both capped; the target score grows by 500 per level.
    """
    if level < 1:
        raise ValueError(f"Level must be >= 1, got {level}")
    if level <= len(_LEVEL_TABLE):
        return _LEVEL_TABLE[level - 1]
    last = _LEVEL_TABLE[-1]
    diff = level - last.level
    return LevelConfig(
        level=level,
        rows=min(MAX_ROWS, last.rows + diff // 2),
        cols=min(MAX_COLS, last.cols + diff // 2),
        color_count=min(MAX_COLORS, last.color_count + diff // 3),
        target_score=last.target_score + diff * TARGET_STEP,
        time_limit=min(MAX_TIME_LIMIT, last.time_limit + diff * TIME_STEP),
    )
