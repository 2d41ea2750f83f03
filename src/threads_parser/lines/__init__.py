"""Line classification layer for Threads parsing.

Key Components:
    LineClassifier: Splits source into kept lines with their indent depth
    ClassifiedLine: One kept line (indent, trimmed text, original line number)
    ClassificationResult: Kept lines plus counts of skipped lines
    indent_depth: Leading-whitespace depth of a raw line
"""

from .classifier import (
    ClassificationResult,
    ClassifiedLine,
    LineClassifier,
    indent_depth,
)

__all__ = [
    "ClassificationResult",
    "ClassifiedLine",
    "LineClassifier",
    "indent_depth",
]
