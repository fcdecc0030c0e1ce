"""FlatFS Virtual Hierarchy.

Derives directories, existence checks and searches from a flat list of
file paths.
"""

from .engine import HierarchyEngine, PathQuery

__all__ = [
    "HierarchyEngine",
    "PathQuery",
]
