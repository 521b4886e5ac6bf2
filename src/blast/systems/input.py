from blast.events.bus import EventBus, EVENT_MOUSE_PRESS, EVENT_SESSION_RESET, EVENT_TILE_CLICK
from blast.components.game_state import GameMode
from blast.constants import CLICK_THROTTLE_INTERVAL
from blast.ui.layout import cell_at_point
from blast.utils.game_state import current_mode
from blast.utils.input_throttle import ClickThrottle
from blast.utils.resources import get_board

LEFT_BUTTON = 1


class InputSystem:
    """Translates left clicks on the board into EVENT_TILE_CLICK."""

    def __init__(self, event_bus: EventBus, window, world, *, throttle: ClickThrottle | None = None):
        self.event_bus = event_bus
        self.window = window
        self.world = world
        self.throttle = throttle or ClickThrottle(min_interval=CLICK_THROTTLE_INTERVAL)
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self.event_bus.subscribe(EVENT_SESSION_RESET, self.on_session_reset)

    def on_session_reset(self, sender, **kwargs):
        # A fresh board starts with no remembered presses.
        self.throttle.reset()

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None:
            return
        if kwargs.get('button') != LEFT_BUTTON:
            return
        if current_mode(self.world) != GameMode.PLAYING:
            return
        board = get_board(self.world)
        if board is None:
            return
        cell = cell_at_point(x, y, self.window.width, self.window.height, board.rows, board.cols)
        if cell is None:
            return
        row, col = cell
        if not self.throttle.allow(row, col):
            return
        self.event_bus.emit(EVENT_TILE_CLICK, row=row, col=col)
