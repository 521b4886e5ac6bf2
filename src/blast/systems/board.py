import logging

from esper import World

from blast.components.board import Board, Grid
from blast.components.game_state import GameMode
from blast.components.level_config import LevelConfig
from blast.constants import AUTO_SHUFFLE_DELAY, GRID_UPDATE_DELAY, MESSAGE_DURATION, SETTLE_DELAY
from blast.events.bus import (
    EventBus,
    EVENT_BOARD_SHUFFLED,
    EVENT_GRID_SETTLED,
    EVENT_LEVEL_TARGET_REACHED,
    EVENT_MATCH_FOUND,
    EVENT_NO_MOVES,
)
from blast.systems import grid_ops
from blast.utils.game_state import current_mode, set_game_mode, set_message
from blast.utils.resources import get_matched_blocks, get_session

logger = logging.getLogger(__name__)

NO_MOVES_MESSAGE = "No moves left, shuffling the board..."
SHUFFLED_MESSAGE = "Board shuffled! Keep going."


class BoardSystem:
    """Owns the board entity and every transition that replaces its grid."""

    def __init__(self, world: World, event_bus: EventBus, rows: int = 6, cols: int = 5, color_count: int = 3):
        self.world = world
        self.event_bus = event_bus
        self.board_entity = self.world.create_entity(Board(rows=rows, cols=cols, color_count=color_count))
        self.event_bus.subscribe(EVENT_MATCH_FOUND, self.on_match_found)

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    @property
    def grid(self) -> Grid:
        return self.board.cells

    def _rng(self):
        return getattr(self.world, "random", None)

    def load_level(self, config: LevelConfig) -> Grid:
        """Resize the board for ``config`` and fill it with a fresh playable grid."""
        board = self.board
        board.rows = config.rows
        board.cols = config.cols
        board.color_count = config.color_count
        board.cells = grid_ops.create_initial_grid(config.rows, config.cols, config.color_count, rng=self._rng())
        return board.cells

    def set_grid(self, cells: Grid) -> None:
        """Replace the grid wholesale; dimensions must match the current board."""
        board = self.board
        if len(cells) != board.rows or any(len(row) != board.cols for row in cells):
            raise ValueError(f"Grid does not match the {board.rows}x{board.cols} board")
        board.cells = cells

    def on_match_found(self, sender, **kwargs):
        self.world.scheduler.schedule(GRID_UPDATE_DELAY, self.update_grid, label="update_grid")

    def update_grid(self) -> bool:
        """Apply gravity for the pending matched cells; return False when nothing was pending."""
        matched = get_matched_blocks(self.world)
        if not matched.keys:
            return False
        board = self.board
        cleared = sorted(matched.keys)
        new_grid, new_blocks = grid_ops.apply_gravity(
            board.cells, cleared, board.rows, board.cols, board.color_count, rng=self._rng()
        )
        board.cells = new_grid
        matched.keys = set()
        self.event_bus.emit(EVENT_GRID_SETTLED, cleared=cleared, new_blocks=len(new_blocks))

        session = get_session(self.world)
        if session.score >= session.target_score:
            self.event_bus.emit(EVENT_LEVEL_TARGET_REACHED, level=session.level, score=session.score)
            return True
        self.world.scheduler.schedule(SETTLE_DELAY, self._check_settled_board, label="settle_check")
        return True

    def check_valid_moves(self) -> bool:
        return grid_ops.has_valid_move(self.board.cells)

    def _check_settled_board(self) -> None:
        if current_mode(self.world) != GameMode.PLAYING:
            return
        if get_session(self.world).time_left <= 0:
            return
        if self.check_valid_moves():
            return
        logger.info("No valid moves left on the board")
        set_game_mode(self.world, self.event_bus, GameMode.SHUFFLING)
        set_message(self.world, self.event_bus, NO_MOVES_MESSAGE)
        self.event_bus.emit(EVENT_NO_MOVES)
        self.world.scheduler.schedule(AUTO_SHUFFLE_DELAY, self._auto_shuffle, label="auto_shuffle")

    def _auto_shuffle(self) -> None:
        if current_mode(self.world) != GameMode.SHUFFLING:
            return
        self.shuffle_board()

    def shuffle_board(self) -> bool:
        """Reshuffle the live grid into a playable layout and resume play."""
        if current_mode(self.world) not in (GameMode.PLAYING, GameMode.SHUFFLING):
            return False
        board = self.board
        shuffled = grid_ops.shuffle_grid(board.cells, board.rows, board.cols, board.color_count, rng=self._rng())
        board.cells = grid_ops.ensure_playable(shuffled, board.rows, board.cols, board.color_count, rng=self._rng())
        set_game_mode(self.world, self.event_bus, GameMode.PLAYING)
        set_message(self.world, self.event_bus, SHUFFLED_MESSAGE, duration=MESSAGE_DURATION)
        self.event_bus.emit(EVENT_BOARD_SHUFFLED)
        return True
