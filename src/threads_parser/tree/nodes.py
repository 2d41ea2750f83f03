"""Node types produced by the Threads parser.

A parse yields a forest of ``Node`` values. ``Node`` is a closed union of two
variants: ``Element`` for structural lines (tag, classes, id, inline content,
children) and ``Text`` for lines that are rendered verbatim.

Each node also carries the ``indent`` it was parsed at. The builder uses it
while assembling the forest; it takes no part in equality, ``repr`` or
``to_dict()``, and callers should not rely on it afterwards.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

DEFAULT_TAG = "div"

VOID_ELEMENTS = frozenset({"img", "input", "hr", "br"})


@dataclass
class Text:
    """A text line, kept verbatim."""

    content: str
    indent: int = field(default=0, compare=False, repr=False)

    def iter_nodes(self) -> Iterator["Node"]:
        yield self

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "text", "content": self.content}


@dataclass
class Element:
    """A structural element line.

    ``classes`` keeps source order and may contain repeats; later style
    resolution depends on that order.
    """

    tag: str = DEFAULT_TAG
    classes: List[str] = field(default_factory=list)
    id: Optional[str] = None
    content: str = ""
    children: List["Node"] = field(default_factory=list)
    indent: int = field(default=0, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate element values."""
        if not self.tag:
            raise ValueError("Element tag cannot be empty")
        if any(not cls for cls in self.classes):
            raise ValueError("Element classes cannot contain empty strings")

    @property
    def is_void(self) -> bool:
        """True if renderers must ignore this element's content and children."""
        return self.tag in VOID_ELEMENTS

    def iter_nodes(self) -> Iterator["Node"]:
        """Iterate over this element and all descendants in document order."""
        stack: List[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, Element):
                stack.extend(reversed(node.children))

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        result: Dict[str, Any] = {
            "type": "element",
            "tag": self.tag,
            "classes": list(self.classes),
            "id": self.id,
            "content": self.content,
            "children": [child.to_dict() for child in self.children],
        }
        return result


Node = Union[Element, Text]


def iter_forest(nodes: Iterable[Node]) -> Iterator[Node]:
    """Iterate over every node of a forest in document order."""
    for root in nodes:
        yield from root.iter_nodes()


def count_nodes(nodes: Iterable[Node]) -> int:
    return sum(1 for _ in iter_forest(nodes))


def forest_depth(nodes: Iterable[Node]) -> int:
    """Number of nesting levels in the forest; 0 for an empty forest."""
    max_depth = 0
    stack = [(root, 1) for root in nodes]
    while stack:
        node, depth = stack.pop()
        max_depth = max(max_depth, depth)
        if isinstance(node, Element):
            stack.extend((child, depth + 1) for child in node.children)
    return max_depth


def forest_to_dicts(nodes: Iterable[Node]) -> List[Dict[str, Any]]:
    return [node.to_dict() for node in nodes]
