"""Threads layout parser.

Turns the indentation-sensitive Threads markup used by the layout editor
into an ordered forest of element and text nodes ready for rendering.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file()
- Level 2: Configured parser - ThreadsParser class with ParserConfig
- Level 3: Individual stages - LineClassifier, LineGrammarParser, ThreadsTreeBuilder
"""

__version__ = "0.1.0"
__author__ = "Spindle Layout Builder Team"

# The tree package must load before the grammar that imports its node types.
from .tree import Element, Node, ParseResult, Text, ThreadsTreeBuilder, VOID_ELEMENTS
from .grammar import ELEMENT_TAGS, LineGrammarParser
from .lines import LineClassifier

from .api import ThreadsParser, parse, parse_file, parse_string

from .shared.config import ParserConfig

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_file",

    # Level 2: Configured parser
    "ThreadsParser",
    "ParserConfig",

    # Level 3: Individual stages
    "LineClassifier",
    "LineGrammarParser",
    "ThreadsTreeBuilder",

    # Result objects and data structures
    "ParseResult",
    "Element",
    "Text",
    "Node",
    "ELEMENT_TAGS",
    "VOID_ELEMENTS",
]
