import sys, os

# Ensure src (and the repository root, for ``tests.helpers``) are importable
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, 'src')
for path in (SRC, ROOT):
    if path not in sys.path:
        sys.path.insert(0, path)

from tests.helpers import FakeClock, MemoryProgressStore, build_engine, grid_from_colors

__all__ = [
    "FakeClock",
    "MemoryProgressStore",
    "build_engine",
    "grid_from_colors",
]
