import random

from blast.components.block import Block
from blast.systems.grid_ops import apply_gravity, compact_columns, has_valid_move
from tests.helpers import grid_from_colors


def test_column_compaction_preserves_order():
    a = Block(id="a", color_index=0)
    b = Block(id="b", color_index=1)
    grid = [[a], [None], [b], [None]]
    compacted = compact_columns(grid, 4, 1)
    assert [row[0] for row in compacted] == [None, None, a, b]


def test_apply_gravity_bottom_packs_and_refills_single_column():
    a = Block(id="a", color_index=0)
    b = Block(id="b", color_index=0)
    grid = [[a], [None], [b], [None]]
    # One color means the refilled column is always playable and left as is.
    new_grid, new_blocks = apply_gravity(grid, set(), 4, 1, 1, rng=random.Random(3))
    column = [row[0] for row in new_grid]
    assert column[2] is a
    assert column[3] is b
    assert column[:2] == new_blocks
    assert len(new_blocks) == 2


def test_apply_gravity_removes_matched_cells_and_drops_blocks_above():
    grid = grid_from_colors([
        [1, 0, 2],
        [2, 0, 1],
        [1, 1, 1],
        [2, 0, 2],
    ])
    new_grid, new_blocks = apply_gravity(grid, {"2,0", "2,1", "2,2"}, 4, 3, 3, rng=random.Random(11))
    assert len(new_blocks) == 3
    # Column 1 settles into three stacked zeros, so no repair is needed.
    assert [new_grid[row][1] for row in (1, 2, 3)] == [grid[0][1], grid[1][1], grid[3][1]]
    assert new_grid[1][0] is grid[0][0]
    assert new_grid[2][0] is grid[1][0]
    assert new_grid[3][0] is grid[3][0]
    assert {new_grid[0][col] for col in range(3)} == set(new_blocks)
    assert has_valid_move(new_grid)


def test_apply_gravity_does_not_mutate_input():
    grid = grid_from_colors([
        [0, 0, 0],
        [1, 1, 1],
    ])
    snapshot = [list(row) for row in grid]
    apply_gravity(grid, {"0,0", "0,1", "0,2"}, 2, 3, 2, rng=random.Random(1))
    assert grid == snapshot


def test_apply_gravity_ignores_malformed_and_out_of_range_keys():
    grid = grid_from_colors([
        [0, 0, 0],
        [0, 0, 0],
    ])
    new_grid, new_blocks = apply_gravity(grid, {"9,9", "bogus", "-1,0"}, 2, 3, 2, rng=random.Random(1))
    assert new_blocks == []
    assert new_grid == grid


def test_refilled_blocks_have_unique_ids_and_valid_colors():
    grid = grid_from_colors([[0, 1, 2, 0]] * 4)
    keys = {f"{row},{col}" for row in range(4) for col in range(4)}
    new_grid, new_blocks = apply_gravity(grid, keys, 4, 4, 3, rng=random.Random(5))
    assert len(new_blocks) == 16
    assert len({block.id for block in new_blocks}) == 16
    assert all(0 <= block.color_index < 3 for row in new_grid for block in row)
    assert has_valid_move(new_grid)
