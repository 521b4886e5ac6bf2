import logging

from esper import World

from blast.components.game_state import GameMode
from blast.constants import MATCH_CHECK_DELAY, MIN_MATCH_SIZE, POINTS_PER_BLOCK
from blast.events.bus import (
    EventBus,
    EVENT_GRID_SETTLED,
    EVENT_MATCH_FOUND,
    EVENT_SELECTION_RESET,
    EVENT_SESSION_RESET,
    EVENT_TILE_CLICK,
    EVENT_TILE_SELECTED,
)
from blast.systems.grid_ops import cell_key, is_adjacent, parse_cell_key
from blast.utils.game_state import current_mode
from blast.utils.resources import get_board, get_matched_blocks, get_selection

logger = logging.getLogger(__name__)


def match_points(size: int) -> int:
    """Base points for a chain of ``size`` blocks, before the combo multiplier."""
    return size * POINTS_PER_BLOCK * max(1, size - 2)


class SelectionSystem:
    """Grows the player's chain and commits it as a match.

    Clicks arriving through EVENT_TILE_CLICK run the full pipeline: select,
    check for a match after MATCH_CHECK_DELAY and, on a match, hold the
    resolution lock until the board reports it has settled. Clicks arriving
    while the lock is held are dropped so two matches never resolve at once.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.resolving = False
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_GRID_SETTLED, self.on_grid_settled)
        self.event_bus.subscribe(EVENT_SESSION_RESET, self.on_session_reset)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        if self.resolving:
            logger.debug("Ignoring click at (%s, %s) while a match is resolving", row, col)
            return
        if not self.select_block(row, col):
            return
        self.world.scheduler.schedule(MATCH_CHECK_DELAY, self._deferred_match_check, label="match_check")

    def on_grid_settled(self, sender, **kwargs):
        self.resolving = False

    def on_session_reset(self, sender, **kwargs):
        self.resolving = False

    def _deferred_match_check(self):
        if self.resolving or current_mode(self.world) != GameMode.PLAYING:
            return
        if self.check_for_matches():
            self.resolving = True

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def select_block(self, row: int, col: int) -> bool:
        """Extend the chain with (row, col) or restart it there.

        Returns False when the click was ignored (not playing, off the board,
        empty or already matched cell).
        """
        if current_mode(self.world) != GameMode.PLAYING:
            return False
        board = get_board(self.world)
        if board is None or not board.in_bounds(row, col):
            return False
        block = board.cells[row][col]
        key = cell_key(row, col)
        if block is None or key in get_matched_blocks(self.world).keys:
            return False
        selection = get_selection(self.world)
        last_key = selection.last()
        if last_key is not None:
            last_row, last_col = parse_cell_key(last_key)
            last_block = board.block_at(last_row, last_col)
            if (
                is_adjacent(row, col, last_row, last_col)
                and last_block is not None
                and last_block.color_index == block.color_index
            ):
                selection.add(key)
                self.event_bus.emit(EVENT_TILE_SELECTED, row=row, col=col, chain=selection.keys())
                return True
            self.event_bus.emit(EVENT_SELECTION_RESET, row=row, col=col)
        selection.start(key)
        self.event_bus.emit(EVENT_TILE_SELECTED, row=row, col=col, chain=selection.keys())
        return True

    def check_for_matches(self) -> bool:
        """Commit the chain as a match if it is long enough."""
        selection = get_selection(self.world)
        size = len(selection)
        if size < MIN_MATCH_SIZE:
            return False
        positions = selection.keys()
        points = match_points(size)
        matched = get_matched_blocks(self.world)
        matched.keys |= set(positions)
        selection.clear()
        self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, size=size, points=points)
        return True
