"""Indentation-driven tree building for Threads parsing.

This module assembles classified lines into an ordered forest using an
explicit indent stack, and defines the ``ParseResult`` returned by the
result-oriented API functions.

Nesting is purely relative: a line nests under the closest preceding line
with a strictly smaller indent that is still open, and one dedent may close
any number of levels at once.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from threads_parser.grammar import LineGrammarParser
from threads_parser.lines import ClassifiedLine
from threads_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    TreeAssemblyError,
    get_logger,
)

from .nodes import (
    Element,
    Node,
    Text,
    count_nodes,
    forest_depth,
    forest_to_dicts,
    iter_forest,
)

# (node, indent, attached to the forest)
Frame = Tuple[Node, int, bool]


class ThreadsTreeBuilder:
    """Builds a forest from classified lines.

    The builder keeps no state between ``build`` calls: the indent stack and
    the root list are locals, so one instance may be shared across threads.
    """

    def __init__(
        self,
        grammar: Optional[LineGrammarParser] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            grammar: Line grammar used to turn each line into a node
            correlation_id: Optional correlation ID for request tracking
        """
        self.grammar = grammar or LineGrammarParser()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")

    def build(
        self,
        lines: Iterable[ClassifiedLine],
        discarded: Optional[List[ClassifiedLine]] = None
    ) -> List[Node]:
        """Assemble ``lines`` (in source order) into a forest.

        Every node opens an indent scope. A text node cannot hold children, so
        lines nested beneath one, and everything nested beneath those, are left
        out of the forest.

        Args:
            lines: Classified lines in source order
            discarded: Optional list that receives the lines left out

        Raises:
            TreeAssemblyError: If the grammar yields something that is not a node
        """
        roots: List[Node] = []
        stack: List[Frame] = []
        dropped = 0

        for line in lines:
            indent = line.indent

            # Equal indent closes the previous sibling; only a strictly
            # greater indent nests.
            while stack and stack[-1][1] >= indent:
                stack.pop()

            node = self.grammar.parse_line(line.text, indent)
            if not isinstance(node, (Element, Text)):
                raise TreeAssemblyError(
                    f"Grammar produced {type(node).__name__} instead of a node",
                    line_number=line.line_number,
                )

            attached = True
            if not stack:
                roots.append(node)
            else:
                parent, _, parent_attached = stack[-1]
                if parent_attached and isinstance(parent, Element):
                    parent.children.append(node)
                else:
                    attached = False
                    dropped += 1
                    if discarded is not None:
                        discarded.append(line)
                    self.logger.bind(line_number=line.line_number).debug(
                        "Line nested under text discarded"
                    )

            stack.append((node, indent, attached))

        self.logger.debug(
            "Forest built",
            extra={"root_count": len(roots), "discarded_lines": dropped}
        )
        return roots


@dataclass
class ParseResult:
    """Forest plus diagnostics and metrics for one parse call.

    ``nodes`` is always a valid forest: either the fully built one or, when
    ``success`` is False, exactly one diagnostic element.
    """

    nodes: List[Node] = field(default_factory=list)
    success: bool = True

    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)

    correlation_id: Optional[str] = None

    # Source shape, shown by hosts next to the preview
    line_count: int = 0
    character_count: int = 0
    skipped_line_count: int = 0

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def root_count(self) -> int:
        return len(self.nodes)

    @property
    def node_count(self) -> int:
        return count_nodes(self.nodes)

    @property
    def element_count(self) -> int:
        """Number of Element nodes anywhere in the forest."""
        return sum(1 for node in iter_forest(self.nodes) if isinstance(node, Element))

    @property
    def text_count(self) -> int:
        return sum(1 for node in iter_forest(self.nodes) if isinstance(node, Text))

    @property
    def max_depth(self) -> int:
        return forest_depth(self.nodes)

    @property
    def processing_time_ms(self) -> float:
        return self.performance.processing_time_ms

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        line_number: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            line_number=line_number,
            details=details,
            correlation_id=self.correlation_id,
        ))

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    @property
    def statistics(self) -> Dict[str, Any]:
        """Counts describing the parsed document."""
        return {
            "root_count": self.root_count,
            "node_count": self.node_count,
            "element_count": self.element_count,
            "text_count": self.text_count,
            "max_depth": self.max_depth,
            "line_count": self.line_count,
            "character_count": self.character_count,
            "lines_skipped": self.skipped_line_count,
        }

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the parse result."""
        return {
            "success": self.success,
            "statistics": self.statistics,
            "performance": self.performance.to_dict(),
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
            "has_errors": self.has_errors(),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        result = self.summary()
        result["nodes"] = forest_to_dicts(self.nodes)
        if self.correlation_id is not None:
            result["correlation_id"] = self.correlation_id
        return result
