import random
import time
from typing import Callable

from esper import World
from .events.bus import EventBus
from blast.components.game_state import GameState, GameMode
from blast.components.matched_blocks import MatchedBlocks
from blast.components.progress_tracker import ProgressTracker
from blast.components.selection import Selection
from blast.components.session import Session


def create_world(
    event_bus: EventBus,
    initial_mode: GameMode = GameMode.MENU,
    *,
    rng: random.Random | None = None,
    clock: Callable[[], float] | None = None,
) -> World:
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "clock", clock or time.monotonic)

    # Singleton entity holding the session-wide resources.
    world.create_entity(
        GameState(mode=initial_mode),
        Session(),
        Selection(),
        MatchedBlocks(),
        ProgressTracker(),
    )

    from blast.systems.scheduler_system import SchedulerSystem

    scheduler = SchedulerSystem(world, event_bus)
    setattr(world, "scheduler", scheduler)
    return world
