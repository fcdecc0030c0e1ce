"""FlatFS Search Patterns.

Parsing of search pattern strings and segment-wise glob matching.
"""

from .pattern import SearchPattern, compile_glob, has_wildcards

__all__ = [
    "SearchPattern",
    "compile_glob",
    "has_wildcards",
]
