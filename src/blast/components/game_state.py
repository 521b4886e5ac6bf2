"""Game state resource describing the active high-level mode."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class GameMode(Enum):
    """High-level game modes that gate which commands are accepted."""
    MENU = auto()
    READY = auto()
    PLAYING = auto()
    PAUSED = auto()
    SHUFFLING = auto()
    GAME_OVER = auto()


@dataclass
class GameState:
    """Singleton component storing the active mode and the transient banner message."""
    mode: GameMode = GameMode.MENU
    message: Optional[str] = None
