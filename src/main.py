"""Entry point for the Block Blast puzzle game.

Sets up the ECS world, event bus, systems, and Arcade window.
"""
import logging

from arcade import Window, run, set_background_color, color, key
from blast.world import create_world
from blast.constants import WINDOW_HEIGHT, WINDOW_TITLE, WINDOW_WIDTH
from blast.events.bus import EVENT_MOUSE_PRESS, EVENT_TICK, EVENT_UI_ACTION, EventBus
from blast.components.game_state import GameMode
from blast.systems.achievement_system import AchievementSystem
from blast.systems.board import BoardSystem
from blast.systems.input import InputSystem
from blast.systems.progress_system import ProgressSystem
from blast.systems.render import RenderSystem
from blast.systems.score_system import ScoreSystem
from blast.systems.selection import SelectionSystem
from blast.systems.session_system import SessionSystem

KEY_ACTIONS = {
    key.ENTER: "confirm",
    key.RETURN: "confirm",
    key.SPACE: "confirm",
    key.P: "toggle_pause",
    key.R: "restart",
    key.S: "shuffle",
    key.ESCAPE: "menu",
}


class BlockBlastWindow(Window):
    def __init__(self):
        super().__init__(WINDOW_WIDTH, WINDOW_HEIGHT, WINDOW_TITLE, resizable=True)
        self.set_update_rate(1/60)
        self.event_bus = EventBus()
        self.world = create_world(self.event_bus, initial_mode=GameMode.MENU)

        # Board and match systems
        self.board_system = BoardSystem(self.world, self.event_bus)
        self.selection_system = SelectionSystem(self.world, self.event_bus)
        self.score_system = ScoreSystem(self.world, self.event_bus)

        # Progression systems
        self.session_system = SessionSystem(self.world, self.event_bus, self.board_system)
        self.progress_system = ProgressSystem(self.world, self.event_bus)
        self.achievement_system = AchievementSystem(self.world, self.event_bus)

        # Interface systems
        self.input_system = InputSystem(self.event_bus, self, self.world)
        self.render_system = RenderSystem(self.world, self.event_bus, self)

        set_background_color(color.BLACK)

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button)

    def on_key_press(self, symbol: int, modifiers: int):
        action = KEY_ACTIONS.get(symbol)
        if action is not None:
            self.event_bus.emit(EVENT_UI_ACTION, action=action)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    window = BlockBlastWindow()
    run()

if __name__ == "__main__":
    main()
