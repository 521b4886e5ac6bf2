from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(slots=True)
class Selection:
    """Insertion-ordered set of cell keys forming the in-progress chain."""
    _keys: Dict[str, None] = field(default_factory=dict)

    def add(self, key: str) -> None:
        # Re-adding a member keeps its original position.
        self._keys.setdefault(key, None)

    def start(self, key: str) -> None:
        self._keys = {key: None}

    def clear(self) -> None:
        self._keys = {}

    def last(self) -> Optional[str]:
        if not self._keys:
            return None
        return next(reversed(self._keys))

    def keys(self) -> List[str]:
        return list(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)
