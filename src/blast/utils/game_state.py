from __future__ import annotations

from esper import World

from blast.components.game_state import GameMode
from blast.events.bus import EVENT_GAME_MODE_CHANGED, EVENT_MESSAGE_CHANGED, EventBus
from blast.utils.resources import get_game_state


def current_mode(world: World) -> GameMode:
    return get_game_state(world).mode


def set_game_mode(world: World, event_bus: EventBus, mode: GameMode) -> None:
    """Update the global game mode and emit a change event when it differs."""
    state = get_game_state(world)
    previous_mode = state.mode
    if previous_mode == mode:
        return
    state.mode = mode
    event_bus.emit(EVENT_GAME_MODE_CHANGED, previous_mode=previous_mode, new_mode=mode)


def set_message(
    world: World,
    event_bus: EventBus,
    message: str | None,
    *,
    duration: float | None = None,
    clear_in_mode: GameMode | None = None,
) -> None:
    """Show a banner message, optionally clearing it after ``duration`` seconds.

    The clear only happens if the same message is still showing (and, when
    ``clear_in_mode`` is given, the game is still in that mode) at that time.
    """
    state = get_game_state(world)
    state.message = message
    event_bus.emit(EVENT_MESSAGE_CHANGED, message=message)
    if message is None or duration is None:
        return

    def _clear_if_current() -> None:
        latest = get_game_state(world)
        if latest.message != message:
            return
        if clear_in_mode is not None and latest.mode != clear_in_mode:
            return
        latest.message = None
        event_bus.emit(EVENT_MESSAGE_CHANGED, message=None)

    world.scheduler.schedule(duration, _clear_if_current, label="clear_message")
