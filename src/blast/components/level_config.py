from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LevelConfig:
    level: int
    rows: int
    cols: int
    color_count: int
    target_score: int
    time_limit: float  # seconds
