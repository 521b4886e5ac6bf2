from dataclasses import dataclass
from typing import Optional

SPECIAL_MULTIPLIERS = {
    "star": 2,
    "rainbow": 3,
    "bomb": 5,
}


@dataclass(frozen=True, slots=True)
class SpecialEffect:
    kind: str
    multiplier: int


@dataclass(frozen=True, slots=True)
class Block:
    """A single colored block occupying one grid cell.

    Blocks are immutable: moving, recoloring or re-stamping a block produces a
    new instance. ``special`` is reserved for power-up blocks and is never set
    by the normal generation path.
    """
    id: str
    color_index: int
    special: Optional[SpecialEffect] = None


def create_special(kind: str) -> SpecialEffect:
    try:
        multiplier = SPECIAL_MULTIPLIERS[kind]
    except KeyError:
        raise ValueError(f"Unknown special block kind: {kind!r}") from None
    return SpecialEffect(kind=kind, multiplier=multiplier)
