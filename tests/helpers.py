from __future__ import annotations

import random
from types import SimpleNamespace
from typing import Sequence

from blast.components.block import Block
from blast.components.game_state import GameMode
from blast.events.bus import EVENT_TICK, EventBus
from blast.systems.achievement_system import AchievementSystem
from blast.systems.board import BoardSystem
from blast.systems.progress_system import ProgressSystem
from blast.systems.score_system import ScoreSystem
from blast.systems.selection import SelectionSystem
from blast.systems.session_system import SessionSystem
from blast.utils.progress_store import ProgressSnapshot
from blast.world import create_world


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.value = start

    def advance(self, amount: float) -> None:
        self.value += amount

    def __call__(self) -> float:
        return self.value


class MemoryProgressStore:
    """In-memory progress store; set ``fail`` to simulate an unavailable backend."""

    def __init__(self, snapshot: ProgressSnapshot | None = None, *, fail: bool = False) -> None:
        self.snapshot = snapshot
        self.fail = fail
        self.saves: list[ProgressSnapshot] = []

    def load(self) -> ProgressSnapshot | None:
        if self.fail:
            raise OSError("store unavailable")
        return self.snapshot

    def save(self, snapshot: ProgressSnapshot) -> None:
        if self.fail:
            raise OSError("store unavailable")
        self.snapshot = snapshot
        self.saves.append(snapshot)


def grid_from_colors(colors: Sequence[Sequence[int | None]]) -> list[list[Block | None]]:
    """Build a grid from rows of color indices (None for an empty cell)."""
    return [
        [None if color is None else Block(id=f"block-{row}-{col}", color_index=color) for col, color in enumerate(cells)]
        for row, cells in enumerate(colors)
    ]


def checkerboard(rows: int, cols: int) -> list[list[Block | None]]:
    """A two-color board where no two neighbours share a color (no valid move)."""
    return grid_from_colors([[(row + col) % 2 for col in range(cols)] for row in range(rows)])


def drive_ticks(bus: EventBus, count: int = 10, dt: float = 0.05) -> None:
    for _ in range(count):
        bus.emit(EVENT_TICK, dt=dt)


def build_engine(
    *,
    seed: int = 1234,
    clock: FakeClock | None = None,
    store: MemoryProgressStore | None = None,
    remote: MemoryProgressStore | None = None,
    start: bool = False,
) -> SimpleNamespace:
    """Wire every gameplay system the way the game window does, minus rendering."""
    bus = EventBus()
    clock = clock or FakeClock()
    world = create_world(bus, initial_mode=GameMode.MENU, rng=random.Random(seed), clock=clock)
    board = BoardSystem(world, bus)
    selection = SelectionSystem(world, bus)
    score = ScoreSystem(world, bus)
    session = SessionSystem(world, bus, board)
    progress = ProgressSystem(world, bus, store=store or MemoryProgressStore(), remote=remote)
    achievements = AchievementSystem(world, bus)
    engine = SimpleNamespace(
        bus=bus,
        world=world,
        clock=clock,
        board=board,
        selection=selection,
        score=score,
        session=session,
        progress=progress,
        achievements=achievements,
    )
    if start:
        session.start_game()
    return engine
