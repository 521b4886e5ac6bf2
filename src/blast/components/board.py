from dataclasses import dataclass, field
from typing import List, Optional

from blast.components.block import Block

Grid = List[List[Optional[Block]]]


@dataclass(slots=True)
class Board:
    rows: int
    cols: int
    color_count: int
    # Row 0 is the top of the board; gravity pulls toward rows - 1.
    cells: Grid = field(default_factory=list)

    def block_at(self, row: int, col: int) -> Optional[Block]:
        if not self.in_bounds(row, col):
            return None
        return self.cells[row][col]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols
