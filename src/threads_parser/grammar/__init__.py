"""Line grammar layer for Threads parsing.

Key Components:
    LineGrammarParser: Builds one childless node from one trimmed line
    ELEMENT_TAGS: The closed set of tag keywords
    parse_selector: Resolves ``tag.class#id`` selectors
    starts_with_element: The element-line versus text-line decision
"""

from .line_parser import (
    ELEMENT_TAGS,
    LineGrammarParser,
    parse_selector,
    split_selector,
    starts_with_element,
)

__all__ = [
    "ELEMENT_TAGS",
    "LineGrammarParser",
    "parse_selector",
    "split_selector",
    "starts_with_element",
]
