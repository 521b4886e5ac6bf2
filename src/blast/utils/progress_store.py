from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Protocol, Tuple

from blast.constants import RECENT_SCORES_LIMIT


@dataclass(frozen=True)
class ProgressSnapshot:
    """Opaque key-value record of long-term progress."""
    high_score: int = 0
    max_level: int = 1
    total_games: int = 0
    recent_scores: Tuple[int, ...] = ()
    achievements: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "high_score": self.high_score,
            "max_level": self.max_level,
            "total_games": self.total_games,
            "recent_scores": list(self.recent_scores),
            "achievements": list(self.achievements),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ProgressSnapshot":
        """Build a snapshot from decoded JSON, raising ValueError/TypeError on bad shapes."""
        if not isinstance(payload, Mapping):
            raise TypeError(f"Progress payload must be a mapping, got {type(payload).__name__}")
        scores = payload.get("recent_scores", [])
        achievements = payload.get("achievements", [])
        if not isinstance(scores, list) or not isinstance(achievements, list):
            raise TypeError("recent_scores and achievements must be lists")
        return cls(
            high_score=int(payload.get("high_score", 0)),
            max_level=max(1, int(payload.get("max_level", 1))),
            total_games=int(payload.get("total_games", 0)),
            recent_scores=tuple(int(score) for score in scores)[-RECENT_SCORES_LIMIT:],
            achievements=tuple(str(item) for item in achievements),
        )


class ProgressStore(Protocol):
    def load(self) -> ProgressSnapshot | None: ...

    def save(self, snapshot: ProgressSnapshot) -> None: ...


def default_save_path() -> Path:
    """Per-user location of the progress file."""
    return Path.home() / ".blockblast" / "progress.json"


class JsonProgressStore:
    """Stores a single ProgressSnapshot as a JSON document on disk."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> ProgressSnapshot | None:
        """Return the stored snapshot, or None when nothing has been saved yet.

        Unreadable or corrupt files raise OSError / ValueError / TypeError;
        callers decide how to recover.
        """
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            return None
        return ProgressSnapshot.from_dict(payload)

    def save(self, snapshot: ProgressSnapshot) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(snapshot.to_dict(), handle, indent=2)


def append_score(history: Tuple[int, ...] | List[int], score: int) -> Tuple[int, ...]:
    return (tuple(history) + (int(score),))[-RECENT_SCORES_LIMIT:]


def _contains_run(history: Tuple[int, ...], run: Tuple[int, ...]) -> bool:
    size = len(run)
    return any(history[start:start + size] == run for start in range(len(history) - size + 1))


def merge_history(
    other: Tuple[int, ...] | List[int],
    local: Tuple[int, ...] | List[int],
) -> Tuple[int, ...]:
    """Append to ``other`` the games of ``local`` it does not already hold.

    ``local`` is skipped when it already appears as a run inside ``other``;
    otherwise only the part after the longest overlap between the end of
    ``other`` and the start of ``local`` is appended.
    """
    theirs = tuple(other)
    ours = tuple(local)
    if _contains_run(theirs, ours):
        return theirs[-RECENT_SCORES_LIMIT:]
    overlap = 0
    for size in range(min(len(theirs), len(ours)), 0, -1):
        if theirs[-size:] == ours[:size]:
            overlap = size
            break
    return (theirs + ours[overlap:])[-RECENT_SCORES_LIMIT:]


def merge_progress(local: ProgressSnapshot, other: ProgressSnapshot) -> ProgressSnapshot:
    """Reconcile two sources of truth without letting either overwrite the other.

    Scalars take the maximum and achievements are unioned. Score histories
    are joined by merge_history, so merging a snapshot with itself (or with
    an earlier merge result) changes nothing.
    """
    achievements = list(other.achievements)
    for item in local.achievements:
        if item not in achievements:
            achievements.append(item)
    return ProgressSnapshot(
        high_score=max(local.high_score, other.high_score),
        max_level=max(local.max_level, other.max_level),
        total_games=max(local.total_games, other.total_games),
        recent_scores=merge_history(other.recent_scores, local.recent_scores),
        achievements=tuple(achievements),
    )
