"""High-level coordinator for level lifecycle, timer and game mode transitions."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from esper import World

from blast.components.game_state import GameMode
from blast.constants import END_GAME_DELAY, MESSAGE_DURATION, START_MESSAGE_DURATION
from blast.events.bus import (
    EVENT_GAME_OVER,
    EVENT_LEVEL_ADVANCED,
    EVENT_LEVEL_TARGET_REACHED,
    EVENT_SESSION_RESET,
    EVENT_TICK,
    EVENT_UI_ACTION,
    EventBus,
)
from blast.factories.levels import get_level_config
from blast.systems.board import BoardSystem
from blast.utils.game_state import current_mode, set_game_mode, set_message
from blast.utils.resources import get_matched_blocks, get_selection, get_session

logger = logging.getLogger(__name__)

TIME_UP_MESSAGE = "Time's up!"
RESTARTABLE_MODES = (GameMode.PLAYING, GameMode.PAUSED, GameMode.SHUFFLING, GameMode.GAME_OVER)


class SessionSystem:
    """Central coordinator for starting, restarting, advancing and ending games."""

    def __init__(self, world: World, event_bus: EventBus, board_system: BoardSystem) -> None:
        self.world = world
        self.event_bus = event_bus
        self.board_system = board_system
        self._actions: Dict[str, Callable[[], Any]] = {
            "confirm": self.confirm,
            "toggle_pause": self.toggle_pause,
            "restart": self.restart_game,
            "shuffle": self.board_system.shuffle_board,
            "menu": self.return_to_menu,
        }

        self.event_bus.subscribe(EVENT_TICK, self._on_tick)
        self.event_bus.subscribe(EVENT_LEVEL_TARGET_REACHED, self._on_level_target_reached)
        self.event_bus.subscribe(EVENT_UI_ACTION, self._on_ui_action)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_tick(self, sender, **payload) -> None:
        dt = payload.get("dt")
        if dt:
            self.update_time_left(dt)

    def _on_level_target_reached(self, sender, **payload) -> None:
        if current_mode(self.world) not in (GameMode.PLAYING, GameMode.SHUFFLING):
            return
        self.advance_level()

    def _on_ui_action(self, sender, **payload) -> None:
        action = self._actions.get(payload.get("action"))
        if action is None:
            logger.debug("Ignoring unknown UI action %r", payload.get("action"))
            return
        action()

    # ------------------------------------------------------------------
    # Lifecycle commands
    # ------------------------------------------------------------------

    def prepare_game(self) -> None:
        if current_mode(self.world) not in (GameMode.MENU, GameMode.GAME_OVER):
            return
        set_game_mode(self.world, self.event_bus, GameMode.READY)

    def start_game(self) -> None:
        self._begin_level(1, reset_score=True, reason="start", message="Level 1 - let's go!")

    def restart_game(self) -> None:
        # Menu and ready screens only lead into play through confirm().
        if current_mode(self.world) not in RESTARTABLE_MODES:
            return
        level = get_session(self.world).level
        self._begin_level(level, reset_score=True, reason="restart", message=f"Level {level} - starting over!")

    def advance_level(self) -> None:
        level = get_session(self.world).level + 1
        self._begin_level(
            level,
            reset_score=False,
            reason="advance",
            message=f"Level {level} - well done!",
            message_duration=MESSAGE_DURATION,
        )
        session = get_session(self.world)
        logger.info("Advanced to level %d with score %d", level, session.score)
        self.event_bus.emit(EVENT_LEVEL_ADVANCED, level=level, score=session.score)

    def end_game(self) -> None:
        session = get_session(self.world)
        if current_mode(self.world) == GameMode.GAME_OVER:
            session.time_left = 0.0
            return
        session.time_left = 0.0
        new_record = session.score > session.high_score
        if new_record:
            session.high_score = session.score
        session.total_games += 1
        logger.info("Game over at level %d with score %d", session.level, session.score)
        self.event_bus.emit(
            EVENT_GAME_OVER,
            score=session.score,
            level=session.level,
            high_score=session.high_score,
            new_record=new_record,
        )
        set_game_mode(self.world, self.event_bus, GameMode.GAME_OVER)
        set_message(
            self.world,
            self.event_bus,
            TIME_UP_MESSAGE,
            duration=MESSAGE_DURATION,
            clear_in_mode=GameMode.GAME_OVER,
        )

    def pause_game(self) -> None:
        if current_mode(self.world) == GameMode.PLAYING:
            set_game_mode(self.world, self.event_bus, GameMode.PAUSED)

    def resume_game(self) -> None:
        if current_mode(self.world) == GameMode.PAUSED:
            set_game_mode(self.world, self.event_bus, GameMode.PLAYING)

    def toggle_pause(self) -> None:
        if current_mode(self.world) == GameMode.PAUSED:
            self.resume_game()
        else:
            self.pause_game()

    def confirm(self) -> None:
        mode = current_mode(self.world)
        if mode in (GameMode.MENU, GameMode.GAME_OVER):
            self.prepare_game()
        elif mode == GameMode.READY:
            self.start_game()

    def return_to_menu(self) -> None:
        session = get_session(self.world)
        session.epoch += 1
        self.event_bus.emit(EVENT_SESSION_RESET, reason="menu", level=session.level, epoch=session.epoch)
        get_selection(self.world).clear()
        get_matched_blocks(self.world).keys = set()
        set_game_mode(self.world, self.event_bus, GameMode.MENU)
        set_message(self.world, self.event_bus, None)

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def update_time_left(self, delta: float) -> None:
        if current_mode(self.world) != GameMode.PLAYING:
            return
        session = get_session(self.world)
        session.time_left = max(0.0, session.time_left - delta)
        if session.time_left > 0 or session.end_scheduled:
            return
        session.end_scheduled = True
        self.world.scheduler.schedule(END_GAME_DELAY, self._end_if_still_playing, label="end_game")

    def _end_if_still_playing(self) -> None:
        if current_mode(self.world) == GameMode.PLAYING:
            self.end_game()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _begin_level(
        self,
        level: int,
        *,
        reset_score: bool,
        reason: str,
        message: str,
        message_duration: float = START_MESSAGE_DURATION,
    ) -> None:
        config = get_level_config(level)
        session = get_session(self.world)
        session.epoch += 1
        self.event_bus.emit(EVENT_SESSION_RESET, reason=reason, level=level, epoch=session.epoch)

        self.board_system.load_level(config)
        get_selection(self.world).clear()
        get_matched_blocks(self.world).keys = set()

        session.level = config.level
        session.target_score = config.target_score
        session.time_left = float(config.time_limit)
        session.combo_multiplier = 1.0
        session.last_match_time = None
        session.level_started_at = self.world.clock()
        session.end_scheduled = False
        if reset_score:
            session.score = 0

        set_game_mode(self.world, self.event_bus, GameMode.PLAYING)
        set_message(
            self.world,
            self.event_bus,
            message,
            duration=message_duration,
            clear_in_mode=GameMode.PLAYING,
        )
