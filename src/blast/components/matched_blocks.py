from dataclasses import dataclass, field
from typing import Set


@dataclass(slots=True)
class MatchedBlocks:
    """Cell keys committed by a match and waiting for gravity to remove them."""
    keys: Set[str] = field(default_factory=set)
