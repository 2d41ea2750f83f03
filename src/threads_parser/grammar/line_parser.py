"""Line grammar for the Threads layout dialect.

Each kept source line becomes exactly one node. A line opens an element when
its first word starts with a known tag (``h1.title``, ``div#main``) or with a
bare class selector (``.card``); every other line is text.

Grammar of an element line::

    element-line := selector (" " content)?
    selector     := tag? ("." class | "#" id)*

Recoverable oddities are resolved locally and never reported: an unknown tag
falls back to ``div``, empty class segments are dropped and the last ``#id``
wins.
"""

import re
from typing import List, Optional, Tuple

from threads_parser.tree.nodes import DEFAULT_TAG, Element, Node, Text

ELEMENT_TAGS = frozenset({
    "section", "div",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "p", "span", "button", "input", "img", "a",
    "ul", "ol", "li",
    "nav", "header", "footer", "main", "article", "aside",
})

CLASS_MARKER = "."
ID_MARKER = "#"

_SEGMENT_DELIMITER = re.compile(r"([.#])")

Segment = Tuple[str, str]


def first_word(line: str) -> str:
    """Text before the first space (the selector of an element line)."""
    return line.split(" ", 1)[0]


def leading_token(word: str) -> str:
    """Text of ``word`` before its first class or id marker."""
    return _SEGMENT_DELIMITER.split(word, 1)[0]


def starts_with_element(line: str) -> bool:
    """Decide whether a trimmed line opens an element.

    Examples:
        >>> starts_with_element("h1.text-3xl Hello")
        True
        >>> starts_with_element(".card")
        True
        >>> starts_with_element("Hello world")
        False
    """
    word = first_word(line)
    return leading_token(word) in ELEMENT_TAGS or word.startswith(CLASS_MARKER)


def split_selector(selector: str) -> List[Segment]:
    """Split a selector into ``(marker, text)`` segments.

    The first segment has an empty marker; the others carry ``"."`` or
    ``"#"``.

    Examples:
        >>> split_selector("div.card#main")
        [('', 'div'), ('.', 'card'), ('#', 'main')]
    """
    parts = _SEGMENT_DELIMITER.split(selector)
    segments: List[Segment] = [("", parts[0])]
    for index in range(1, len(parts), 2):
        segments.append((parts[index], parts[index + 1]))
    return segments


def parse_selector(selector: str) -> Tuple[str, List[str], Optional[str]]:
    """Resolve a selector into ``(tag, classes, id)``.

    Examples:
        >>> parse_selector("div..foo.")
        ('div', ['foo'], None)
        >>> parse_selector("div#a#b")
        ('div', [], 'b')
        >>> parse_selector(".card")
        ('div', ['card'], None)
    """
    segments = split_selector(selector)
    head = segments[0][1]
    tag = head if head in ELEMENT_TAGS else DEFAULT_TAG
    classes: List[str] = []
    element_id: Optional[str] = None

    for marker, text in segments[1:]:
        if marker == ID_MARKER:
            element_id = text
        elif text:
            classes.append(text)

    return tag, classes, element_id


class LineGrammarParser:
    """Turns one trimmed line into a childless node.

    Stateless; one instance can serve any number of concurrent parses.
    """

    def parse_line(self, line: str, indent: int = 0) -> Node:
        """Parse a trimmed, non-empty, non-comment line.

        Args:
            line: The trimmed line text
            indent: Depth the line was found at, recorded on the node

        Returns:
            An ``Element`` for element lines, otherwise a ``Text``
        """
        if not starts_with_element(line):
            return Text(content=line, indent=indent)

        selector, _, content = line.partition(" ")
        tag, classes, element_id = parse_selector(selector)
        return Element(
            tag=tag,
            classes=classes,
            id=element_id,
            content=content,
            indent=indent,
        )
