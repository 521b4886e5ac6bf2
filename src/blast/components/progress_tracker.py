from dataclasses import dataclass, field
from typing import List, Set


@dataclass(slots=True)
class ProgressTracker:
    """Long-term player progress mirrored to the progress store."""
    high_score: int = 0
    max_level: int = 1
    total_games: int = 0
    recent_scores: List[int] = field(default_factory=list)
    achievements: Set[str] = field(default_factory=set)
