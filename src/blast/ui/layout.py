from blast.constants import (
    BOARD_MAX_HEIGHT_PCT,
    BOARD_MAX_WIDTH_PCT,
    BOTTOM_MARGIN,
    HUD_HEIGHT,
    MIN_TILE_SIZE,
)


def compute_board_geometry(window_width: int, window_height: int, rows: int, cols: int):
    """Return (tile_size, start_x, start_y) for a rows x cols board.

    ``start_y`` is the bottom edge of the board in window coordinates; row 0
    is drawn at the top.
    """
    max_board_w = window_width * BOARD_MAX_WIDTH_PCT
    max_board_h = (window_height - BOTTOM_MARGIN - HUD_HEIGHT) * BOARD_MAX_HEIGHT_PCT
    tile_size = int(min(max_board_w / cols, max_board_h / rows))
    if tile_size < MIN_TILE_SIZE:
        tile_size = MIN_TILE_SIZE
    total_width = cols * tile_size
    start_x = (window_width - total_width) / 2
    start_y = BOTTOM_MARGIN
    return tile_size, start_x, start_y


def cell_at_point(x: float, y: float, window_width: int, window_height: int, rows: int, cols: int):
    """Map a window point to (row, col), or None when it misses the board."""
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height, rows, cols)
    if x < start_x or x >= start_x + cols * tile_size:
        return None
    if y < start_y or y >= start_y + rows * tile_size:
        return None
    col = int((x - start_x) // tile_size)
    row_from_bottom = int((y - start_y) // tile_size)
    return rows - 1 - row_from_bottom, col


def cell_rect(row: int, col: int, window_width: int, window_height: int, rows: int, cols: int):
    """Return (left, right, bottom, top) of a cell in window coordinates."""
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height, rows, cols)
    left = start_x + col * tile_size
    bottom = start_y + (rows - 1 - row) * tile_size
    return left, left + tile_size, bottom, bottom + tile_size
