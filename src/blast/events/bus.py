from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems that are not stored anywhere else alive.
        sig.connect(fn, weak=False)

    def emit(self, name: str, /, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float (seconds)


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"                  # payload: x, y, button
EVENT_TILE_CLICK = "tile_click"                    # payload: row, col
EVENT_UI_ACTION = "ui_action"                      # payload: action=str


# ============================================================================
# SELECTION & MATCHING
# ============================================================================
EVENT_TILE_SELECTED = "tile_selected"              # payload: row, col, chain=list[str]
EVENT_SELECTION_RESET = "selection_reset"          # payload: row, col
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=list[str], size=int, points=int
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int, multiplier=float


# ============================================================================
# BOARD
# ============================================================================
EVENT_GRID_SETTLED = "grid_settled"                # payload: cleared=list[str], new_blocks=int
EVENT_NO_MOVES = "no_moves"                        # payload: None
EVENT_BOARD_SHUFFLED = "board_shuffled"            # payload: None


# ============================================================================
# SESSION & PROGRESSION
# ============================================================================
EVENT_GAME_MODE_CHANGED = "game_mode_changed"      # payload: previous_mode=GameMode|None, new_mode=GameMode
EVENT_SESSION_RESET = "session_reset"              # payload: reason=str, level=int, epoch=int
EVENT_LEVEL_TARGET_REACHED = "level_target_reached"  # payload: level=int, score=int
EVENT_LEVEL_ADVANCED = "level_advanced"            # payload: level=int, score=int
EVENT_GAME_OVER = "game_over"                      # payload: score=int, level=int, high_score=int, new_record=bool
EVENT_MESSAGE_CHANGED = "message_changed"          # payload: message=str|None


# ============================================================================
# PROGRESS & ACHIEVEMENTS
# ============================================================================
EVENT_ACHIEVEMENT_UNLOCKED = "achievement_unlocked"  # payload: achievement_id=str, name=str
EVENT_PROGRESS_SAVED = "progress_saved"            # payload: snapshot=ProgressSnapshot
