from __future__ import annotations

import itertools
import logging
import random
from dataclasses import replace
from typing import Iterable, List, Optional, Set, Tuple

from blast.components.block import Block
from blast.components.board import Grid
from blast.constants import (
    MIN_MATCH_SIZE,
    REGENERATE_MAX_ATTEMPTS,
    SHUFFLE_MAX_ATTEMPTS,
    SHUFFLE_RECOLOR_CHANCE,
)

logger = logging.getLogger(__name__)

Position = Tuple[int, int]

_NEIGHBOUR_OFFSETS = ((0, 1), (1, 0), (0, -1), (-1, 0))
_refill_serial = itertools.count(1)


def cell_key(row: int, col: int) -> str:
    return f"{row},{col}"


def parse_cell_key(key: str) -> Position:
    """Turn a ``"row,col"`` key back into integer coordinates."""
    parts = key.split(",")
    if len(parts) != 2:
        raise ValueError(f"Malformed cell key: {key!r}")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"Malformed cell key: {key!r}") from None


def _rng_or_default(rng: random.Random | None) -> random.Random:
    if isinstance(rng, random.Random):
        return rng
    return random.Random()


def create_grid(rows: int, cols: int, color_count: int, *, rng: random.Random | None = None) -> Grid:
    """Fill a rows x cols grid with uniformly random colors (no playability guarantee)."""
    rng = _rng_or_default(rng)
    return [
        [Block(id=f"block-{row}-{col}", color_index=rng.randrange(color_count)) for col in range(cols)]
        for row in range(rows)
    ]


def create_initial_grid(rows: int, cols: int, color_count: int, *, rng: random.Random | None = None) -> Grid:
    rng = _rng_or_default(rng)
    return ensure_playable(create_grid(rows, cols, color_count, rng=rng), rows, cols, color_count, rng=rng)


def copy_grid(grid: Grid) -> Grid:
    return [list(row) for row in grid]


def is_adjacent(row1: int, col1: int, row2: int, col2: int) -> bool:
    """True when the cells share an edge (no diagonals)."""
    return abs(row1 - row2) + abs(col1 - col2) == 1


def find_connected_region(
    grid: Grid,
    row: int,
    col: int,
    color_index: int,
    visited: Set[str] | None = None,
) -> List[str]:
    """Collect the keys of every same-colored cell 4-connected to (row, col).

    ``visited`` is updated in place; cells already in it are skipped, so a
    pre-seeded set excludes those cells from the region.
    """
    if visited is None:
        visited = set()
    rows = len(grid)
    if rows == 0:
        return []
    cols = len(grid[0])
    region: List[str] = []
    # Explicit work-list keeps large boards clear of the recursion limit.
    stack: List[Position] = [(row, col)]
    while stack:
        r, c = stack.pop()
        if not (0 <= r < rows and 0 <= c < cols):
            continue
        key = cell_key(r, c)
        if key in visited:
            continue
        block = grid[r][c]
        if block is None or block.color_index != color_index:
            continue
        visited.add(key)
        region.append(key)
        for dr, dc in _NEIGHBOUR_OFFSETS:
            stack.append((r + dr, c + dc))
    return region


def has_valid_move(grid: Grid) -> bool:
    """Return True if some group of MIN_MATCH_SIZE or more same-colored cells is connected."""
    visited: Set[str] = set()
    for row, cells in enumerate(grid):
        for col, block in enumerate(cells):
            if block is None or cell_key(row, col) in visited:
                continue
            region = find_connected_region(grid, row, col, block.color_index, visited)
            if len(region) >= MIN_MATCH_SIZE:
                return True
    return False


def _matched_positions(keys: Iterable[str], rows: int, cols: int) -> List[Position]:
    positions: List[Position] = []
    for key in keys:
        try:
            row, col = parse_cell_key(key)
        except ValueError:
            logger.debug("Ignoring malformed matched key %r", key)
            continue
        if 0 <= row < rows and 0 <= col < cols:
            positions.append((row, col))
    return positions


def compact_columns(grid: Grid, rows: int, cols: int) -> Grid:
    """Drop every block to the bottom of its column, keeping the column order."""
    compacted: Grid = [[None] * cols for _ in range(rows)]
    for col in range(cols):
        survivors = [grid[row][col] for row in range(rows) if grid[row][col] is not None]
        offset = rows - len(survivors)
        for index, block in enumerate(survivors):
            compacted[offset + index][col] = block
    return compacted


def refill_empty_cells(
    grid: Grid,
    rows: int,
    cols: int,
    color_count: int,
    *,
    rng: random.Random | None = None,
) -> List[Block]:
    """Fill empty cells in place, column by column from the top; return the new blocks."""
    rng = _rng_or_default(rng)
    spawned: List[Block] = []
    for col in range(cols):
        for row in range(rows):
            if grid[row][col] is not None:
                continue
            block = Block(
                id=f"block-new-{row}-{col}-{next(_refill_serial)}",
                color_index=rng.randrange(color_count),
            )
            grid[row][col] = block
            spawned.append(block)
    return spawned


def apply_gravity(
    grid: Grid,
    matched_keys: Iterable[str],
    rows: int,
    cols: int,
    color_count: int,
    *,
    rng: random.Random | None = None,
) -> Tuple[Grid, List[Block]]:
    """Remove matched cells, compact columns, refill, and repair playability.

    Returns the next grid and the blocks created by the refill. The input grid
    is left untouched.
    """
    rng = _rng_or_default(rng)
    cleared = copy_grid(grid)
    for row, col in _matched_positions(matched_keys, rows, cols):
        cleared[row][col] = None
    settled = compact_columns(cleared, rows, cols)
    new_blocks = refill_empty_cells(settled, rows, cols, color_count, rng=rng)
    playable, modified = ensure_playable_with_status(settled, rows, cols, color_count, rng=rng)
    return (playable if modified else settled), new_blocks


def shuffle_grid(
    grid: Grid,
    rows: int,
    cols: int,
    color_count: int,
    *,
    rng: random.Random | None = None,
) -> Grid:
    """Permute the existing blocks over their occupied cells.

    Each relocated block is re-stamped with its new position and, with
    probability SHUFFLE_RECOLOR_CHANCE, recolored to raise the odds of a
    playable board.
    """
    rng = _rng_or_default(rng)
    blocks: List[Block] = []
    positions: List[Position] = []
    for row in range(rows):
        for col in range(cols):
            block = grid[row][col]
            if block is not None:
                blocks.append(block)
                positions.append((row, col))
    for i in range(len(blocks) - 1, 0, -1):
        j = rng.randint(0, i)
        blocks[i], blocks[j] = blocks[j], blocks[i]
    shuffled: Grid = [[None] * cols for _ in range(rows)]
    for block, (row, col) in zip(blocks, positions):
        color_index = block.color_index
        if rng.random() < SHUFFLE_RECOLOR_CHANCE:
            color_index = rng.randrange(color_count)
        shuffled[row][col] = replace(block, id=f"block-{row}-{col}", color_index=color_index)
    return shuffled


def _shuffle_until_playable(
    grid: Grid,
    rows: int,
    cols: int,
    color_count: int,
    rng: random.Random,
    max_attempts: int,
) -> Optional[Grid]:
    current = grid
    attempts = 0
    while not has_valid_move(current) and attempts < max_attempts:
        current = shuffle_grid(current, rows, cols, color_count, rng=rng)
        attempts += 1
    if has_valid_move(current):
        if attempts:
            logger.info("Board reshuffled into a playable layout after %d attempt(s)", attempts)
        return current
    return None


def ensure_playable(
    grid: Grid,
    rows: int,
    cols: int,
    color_count: int,
    *,
    rng: random.Random | None = None,
    max_attempts: int = SHUFFLE_MAX_ATTEMPTS,
    max_regenerations: int = REGENERATE_MAX_ATTEMPTS,
) -> Grid:
    """Return a grid with at least one valid move.

    The grid is reshuffled up to ``max_attempts`` times; if it is still stuck a
    fresh grid is generated and put through the same routine, so a regenerated
    grid is never returned unverified.
    """
    if rows * cols < MIN_MATCH_SIZE or color_count < 1:
        raise ValueError(f"A {rows}x{cols} board with {color_count} colors can never hold a valid move")
    rng = _rng_or_default(rng)
    playable = _shuffle_until_playable(grid, rows, cols, color_count, rng, max_attempts)
    if playable is not None:
        return playable
    for regeneration in range(1, max_regenerations + 1):
        logger.info("Shuffling failed, regenerating the board (attempt %d)", regeneration)
        fresh = create_grid(rows, cols, color_count, rng=rng)
        playable = _shuffle_until_playable(fresh, rows, cols, color_count, rng, max_attempts)
        if playable is not None:
            return playable
    raise RuntimeError("Unable to generate a board with a valid move")


def ensure_playable_with_status(
    grid: Grid,
    rows: int,
    cols: int,
    color_count: int,
    *,
    rng: random.Random | None = None,
) -> Tuple[Grid, bool]:
    """Like ensure_playable, but also report whether the grid had to change."""
    if has_valid_move(grid):
        return grid, False
    return ensure_playable(grid, rows, cols, color_count, rng=rng), True
