"""Line classification for Threads source text.

Splits raw source into logical lines, measures each line's indentation depth
and drops blank and comment lines before they reach tree construction.
Skipped lines leave no trace in the output: they cannot hold an indent level
open or close one.
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

from threads_parser.shared import IndentConfig, ParserConfig, get_logger

SPACE = " "
TAB = "\t"


@dataclass(frozen=True)
class ClassifiedLine:
    """A non-blank, non-comment source line ready for the grammar parser."""

    indent: int
    text: str
    line_number: int  # 1-based position in the original source

    def __post_init__(self) -> None:
        if self.indent < 0:
            raise ValueError("indent must be >= 0")
        if not self.text:
            raise ValueError("Classified line text cannot be empty")


@dataclass
class ClassificationResult:
    """Classified lines in source order plus counts of what was dropped."""

    lines: List[ClassifiedLine] = field(default_factory=list)
    total_lines: int = 0
    skipped_blank: int = 0
    skipped_comments: int = 0

    def __iter__(self) -> Iterator[ClassifiedLine]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def skipped_total(self) -> int:
        return self.skipped_blank + self.skipped_comments


def indent_depth(line: str, space_width: int = 1, tab_width: int = 2) -> int:
    """Compute the indentation depth of ``line``.

    Each leading space adds ``space_width`` and each leading tab adds
    ``tab_width``; scanning stops at the first other character. Mixed
    indentation is taken literally.

    Examples:
        >>> indent_depth("    p Body")
        4
        >>> indent_depth("\\t h1")
        3
    """
    depth = 0
    for char in line:
        if char == SPACE:
            depth += space_width
        elif char == TAB:
            depth += tab_width
        else:
            break
    return depth


class LineClassifier:
    """Turns source text into ``ClassifiedLine`` records.

    The classifier holds configuration only; every call to ``classify`` works
    on fresh local state and may run concurrently with other calls.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "line_classifier")

    @property
    def indent_config(self) -> IndentConfig:
        return self.config.indent

    @property
    def comment_prefix(self) -> str:
        return self.config.classifier.comment_prefix

    def is_comment(self, trimmed: str) -> bool:
        """Check whether an already-trimmed line is a comment line."""
        return trimmed.startswith(self.comment_prefix)

    def classify(self, source: Any) -> ClassificationResult:
        """Classify every line of ``source``.

        Args:
            source: Threads source text. ``None`` or any non-``str`` value is
                treated as nothing to parse.

        Returns:
            ClassificationResult with the kept lines in source order
        """
        result = ClassificationResult()
        if not isinstance(source, str) or not source:
            return result

        space_width = self.indent_config.space_width
        tab_width = self.indent_config.tab_width

        for line_number, raw_line in enumerate(source.split("\n"), start=1):
            result.total_lines += 1
            trimmed = raw_line.strip()
            if not trimmed:
                result.skipped_blank += 1
                continue
            if self.is_comment(trimmed):
                result.skipped_comments += 1
                continue

            result.lines.append(ClassifiedLine(
                indent=indent_depth(raw_line, space_width, tab_width),
                text=trimmed,
                line_number=line_number,
            ))

        self.logger.debug(
            "Source classified",
            extra={
                "total_lines": result.total_lines,
                "kept_lines": len(result.lines),
                "skipped_blank": result.skipped_blank,
                "skipped_comments": result.skipped_comments,
            }
        )
        return result
