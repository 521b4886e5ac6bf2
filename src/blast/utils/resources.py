from __future__ import annotations

from typing import Type, TypeVar

from esper import World

from blast.components.board import Board
from blast.components.game_state import GameState
from blast.components.matched_blocks import MatchedBlocks
from blast.components.progress_tracker import ProgressTracker
from blast.components.selection import Selection
from blast.components.session import Session

T = TypeVar("T")


def _singleton(world: World, component_type: Type[T]) -> T:
    for _, component in world.get_component(component_type):
        return component
    raise RuntimeError(f"{component_type.__name__} resource not found")


def get_game_state(world: World) -> GameState:
    return _singleton(world, GameState)


def get_session(world: World) -> Session:
    return _singleton(world, Session)


def get_selection(world: World) -> Selection:
    return _singleton(world, Selection)


def get_matched_blocks(world: World) -> MatchedBlocks:
    return _singleton(world, MatchedBlocks)


def get_progress_tracker(world: World) -> ProgressTracker:
    return _singleton(world, ProgressTracker)


def get_board(world: World) -> Board | None:
    for _, board in world.get_component(Board):
        return board
    return None
