"""Diagnostic and metrics types for Threads parsing.

This module defines the diagnostic entries and performance counters attached
to every parse result. Diagnostics never replace the forest; they only explain
how it was produced.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    INFO = auto()
    WARNING = auto()
    ERROR = auto()      # Source could not be read; output is the diagnostic node
    CRITICAL = auto()   # Pipeline failed; output is the diagnostic node


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    line_number: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert diagnostic to dictionary representation."""
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.line_number is not None:
            result["line_number"] = self.line_number
        if self.details:
            result["details"] = dict(self.details)
        return result


@dataclass
class PerformanceMetrics:
    """Performance metrics for a single parse call."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    lines_processed: int = 0
    lines_skipped: int = 0
    nodes_created: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def lines_per_second(self) -> float:
        """Calculate source lines processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.lines_processed * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processing_time_ms": self.processing_time_ms,
            "characters_processed": self.characters_processed,
            "lines_processed": self.lines_processed,
            "lines_skipped": self.lines_skipped,
            "nodes_created": self.nodes_created,
            "characters_per_second": self.characters_per_second,
        }
