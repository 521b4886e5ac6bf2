from __future__ import annotations

import logging
from typing import Any, Callable, List

from esper import World

from blast.components.deferred_action import DeferredAction
from blast.components.game_state import GameMode
from blast.events.bus import EVENT_SESSION_RESET, EVENT_TICK, EventBus
from blast.utils.resources import get_game_state, get_session

logger = logging.getLogger(__name__)


class SchedulerSystem:
    """Runs fire-and-forget delayed callbacks off the game tick.

    Each pending callback is a DeferredAction entity. Time only advances while
    the game is not paused. Actions scheduled before the latest session reset
    are cancelled on EVENT_SESSION_RESET and, should one survive, dropped at
    fire time because its epoch no longer matches.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_SESSION_RESET, self.on_session_reset)

    def schedule(self, delay: float, callback: Callable[[], None], *, label: str = "") -> int:
        epoch = get_session(self.world).epoch
        action = DeferredAction(remaining=max(0.0, float(delay)), callback=callback, epoch=epoch, label=label)
        return self.world.create_entity(action)

    def cancel(self, entity: int) -> None:
        if self.world.entity_exists(entity):
            self.world.delete_entity(entity, immediate=True)

    def cancel_all(self) -> int:
        pending = [entity for entity, _ in self.world.get_component(DeferredAction)]
        for entity in pending:
            self.world.delete_entity(entity, immediate=True)
        return len(pending)

    def pending_labels(self) -> List[str]:
        return [action.label for _, action in self.world.get_component(DeferredAction)]

    def on_session_reset(self, sender: Any, **payload: Any) -> None:
        cancelled = self.cancel_all()
        if cancelled:
            logger.debug("Cancelled %d deferred action(s) on %s", cancelled, payload.get("reason"))

    def on_tick(self, sender: Any, **payload: Any) -> None:
        dt = payload.get("dt", 0.0) or 0.0
        if get_game_state(self.world).mode == GameMode.PAUSED:
            return
        due: List[int] = []
        for entity, action in self.world.get_component(DeferredAction):
            action.remaining -= dt
            if action.remaining <= 0.0:
                due.append(entity)
        for entity in due:
            # An earlier callback in this batch may have reset the session.
            if not self.world.entity_exists(entity):
                continue
            action = self.world.component_for_entity(entity, DeferredAction)
            self.world.delete_entity(entity, immediate=True)
            if action.epoch != get_session(self.world).epoch:
                logger.debug("Dropping stale deferred action %r", action.label)
                continue
            action.callback()
