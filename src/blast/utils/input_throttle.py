from __future__ import annotations

from dataclasses import dataclass, field
from time import monotonic
from typing import Callable, Dict, Tuple

Cell = Tuple[int, int]


@dataclass(slots=True)
class ClickThrottle:
	"""Drops repeated activations of the same board cell.

	A press on a cell is rejected if the same cell was accepted less than
	``min_interval`` seconds ago. Presses on different cells are never held
	back; serialising match resolution is the selection system's job.
	"""

	min_interval: float = 0.3
	clock: Callable[[], float] | None = field(default=None, repr=False)

	_clock: Callable[[], float] = field(init=False, repr=False)
	_last_press: Dict[Cell, float] = field(init=False, repr=False)

	def __post_init__(self) -> None:
		self._clock = self.clock or monotonic
		self._last_press = {}
		self.min_interval = max(0.0, float(self.min_interval))

	def allow(self, row: int, col: int) -> bool:
		now = self._clock()
		cell = (row, col)
		last = self._last_press.get(cell)
		if last is not None and (now - last) < self.min_interval:
			return False
		self._last_press[cell] = now
		return True

	def reset(self) -> None:
		self._last_press.clear()
