import math

import arcade
from esper import World

from blast.components.game_state import GameMode
from blast.constants import HUD_HEIGHT, PALETTE
from blast.events.bus import EventBus
from blast.systems.grid_ops import cell_key
from blast.ui.layout import cell_rect
from blast.utils.resources import get_board, get_game_state, get_matched_blocks, get_selection, get_session

PADDING = 3

MODE_BANNERS = {
    GameMode.MENU: "BLOCK BLAST - press Enter",
    GameMode.READY: "Ready? Press Enter to start",
    GameMode.PAUSED: "Paused - press P to resume",
    GameMode.GAME_OVER: "Game over - Enter for a new game, R to retry",
}


class RenderSystem:
    """Draws the board and HUD from a read-only view of the world."""

    def __init__(self, world: World, event_bus: EventBus, window):
        self.world = world
        self.event_bus = event_bus
        self.window = window

    def process(self):
        state = get_game_state(self.world)
        if state.mode not in (GameMode.MENU, GameMode.READY):
            self._draw_board()
            self._draw_hud()
        banner = state.message or MODE_BANNERS.get(state.mode)
        if banner:
            arcade.draw_text(
                banner,
                self.window.width / 2,
                self.window.height - HUD_HEIGHT - 24,
                arcade.color.WHITE,
                18,
                anchor_x="center",
            )

    def _draw_board(self):
        board = get_board(self.world)
        if board is None or not board.cells:
            return
        selected = set(get_selection(self.world).keys())
        matched = get_matched_blocks(self.world).keys
        width, height = self.window.width, self.window.height
        for row in range(board.rows):
            for col in range(board.cols):
                block = board.cells[row][col]
                left, right, bottom, top = cell_rect(row, col, width, height, board.rows, board.cols)
                if block is None:
                    continue
                key = cell_key(row, col)
                color = PALETTE[block.color_index % len(PALETTE)]
                if key in matched:
                    color = (color[0] // 3, color[1] // 3, color[2] // 3)
                arcade.draw_lrbt_rectangle_filled(left + PADDING, right - PADDING, bottom + PADDING, top - PADDING, color)
                if key in selected:
                    arcade.draw_lrbt_rectangle_outline(left + 1, right - 1, bottom + 1, top - 1, arcade.color.WHITE, 3)

    def _draw_hud(self):
        session = get_session(self.world)
        top = self.window.height - 30
        hud = (
            f"Level {session.level}   Score {session.score}/{session.target_score}   "
            f"Best {session.high_score}   Time {math.ceil(session.time_left)}s   "
            f"Combo x{session.combo_multiplier:g}"
        )
        arcade.draw_text(hud, 20, top, arcade.color.WHITE, 16)
