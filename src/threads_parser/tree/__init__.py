"""Tree layer for Threads parsing.

Key Components:
    Element, Text: The two node variants; ``Node`` is their union
    ThreadsTreeBuilder: Assembles classified lines into a forest
    ParseResult: Forest with diagnostics, metrics and statistics
"""

from .nodes import (
    DEFAULT_TAG,
    VOID_ELEMENTS,
    Element,
    Node,
    Text,
    count_nodes,
    forest_depth,
    forest_to_dicts,
    iter_forest,
)
from .builder import (
    ParseResult,
    ThreadsTreeBuilder,
)

__all__ = [
    "DEFAULT_TAG",
    "VOID_ELEMENTS",
    "Element",
    "Node",
    "Text",
    "count_nodes",
    "forest_depth",
    "forest_to_dicts",
    "iter_forest",
    "ParseResult",
    "ThreadsTreeBuilder",
]
