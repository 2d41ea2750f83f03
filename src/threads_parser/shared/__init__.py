"""Shared utilities for Threads parsing.

This module provides the configuration objects, diagnostic types, exceptions
and logging helpers used across the classifier, grammar and tree layers.
"""

from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)
from .config import (
    DIAGNOSTIC_CLASSES,
    ClassifierConfig,
    DiagnosticConfig,
    GlobalConfig,
    IndentConfig,
    ParserConfig,
)
from .exceptions import (
    ConfigError,
    ConfigValidationError,
    ThreadsParserError,
    TreeAssemblyError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
    "DIAGNOSTIC_CLASSES",
    "ClassifierConfig",
    "DiagnosticConfig",
    "GlobalConfig",
    "IndentConfig",
    "ParserConfig",
    "ConfigError",
    "ConfigValidationError",
    "ThreadsParserError",
    "TreeAssemblyError",
    "CorrelationLogger",
    "get_logger",
]
