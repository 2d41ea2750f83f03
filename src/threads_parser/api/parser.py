"""Parser API for the Threads layout dialect.

This module provides the parsing entry points, from the plain ``parse()``
function that returns a forest to the reusable ``ThreadsParser`` class.

Every entry point is total. If any stage fails, the partial forest is thrown
away and replaced by a single diagnostic element whose content describes the
failure, so hosts can render errors through their normal rendering path.
"""

import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from threads_parser.grammar import LineGrammarParser
from threads_parser.lines import ClassifiedLine, LineClassifier
from threads_parser.shared import DiagnosticSeverity, ParserConfig, get_logger
from threads_parser.tree import Element, Node, ParseResult, ThreadsTreeBuilder

PREVIEW_LENGTH = 100  # Max length for source preview in logs
MS_PER_SECOND = 1000


def parse(source: Any, config: Optional[ParserConfig] = None) -> List[Node]:
    """Parse Threads source into an ordered forest of nodes.

    Args:
        source: Threads source text; anything that is not a ``str`` parses to
            an empty forest
        config: Optional parser configuration

    Returns:
        List of root nodes, or a single diagnostic element on internal failure

    Examples:
        >>> forest = parse("section.bg-white\\n  h1 Hello")
        >>> forest[0].children[0].content
        'Hello'
        >>> parse(None)
        []
    """
    return parse_string(source, config=config).nodes


def parse_string(
    source: Any,
    correlation_id: Optional[str] = None,
    config: Optional[ParserConfig] = None
) -> ParseResult:
    """Parse Threads source and return the forest with diagnostics.

    Args:
        source: Threads source text
        correlation_id: Optional correlation ID for request tracking
        config: Optional parser configuration

    Returns:
        ParseResult whose ``nodes`` is always a valid forest
    """
    config = config or ParserConfig()
    logger = get_logger(__name__, correlation_id, "parse_string")

    if isinstance(source, str):
        logger.info(
            "Starting string parse operation",
            extra={
                "content_length": len(source),
                "preview": (
                    source[:PREVIEW_LENGTH] + "..."
                    if len(source) > PREVIEW_LENGTH else source
                )
            }
        )

    return _parse_source(source, config, correlation_id)


def parse_file(
    file_path: Union[str, Path],
    encoding: str = "utf-8",
    correlation_id: Optional[str] = None,
    config: Optional[ParserConfig] = None
) -> ParseResult:
    """Parse a Threads file.

    Missing or unreadable files do not raise; they produce the diagnostic
    element with ``success`` set to False.

    Args:
        file_path: Path to the ``.threads`` file
        encoding: Text encoding of the file
        correlation_id: Optional correlation ID for request tracking
        config: Optional parser configuration

    Returns:
        ParseResult for the file contents
    """
    start_time = time.time()
    config = config or ParserConfig()
    logger = get_logger(__name__, correlation_id, "parse_file")
    path_obj = Path(file_path)

    logger.info(
        "Starting file parse operation",
        extra={"file_path": str(path_obj), "encoding": encoding}
    )

    error_message = None
    if not path_obj.exists():
        error_message = f"File not found: {path_obj}"
    elif not path_obj.is_file():
        error_message = f"Path is not a file: {path_obj}"

    if error_message is None:
        try:
            content = path_obj.read_text(encoding=encoding)
        except PermissionError:
            error_message = f"Permission denied accessing file: {path_obj}"
        except (OSError, UnicodeDecodeError, LookupError) as e:
            error_message = f"Could not read {path_obj}: {e}"
        else:
            result = _parse_source(content, config, correlation_id)
            result.add_diagnostic(
                DiagnosticSeverity.INFO,
                f"File parsed with encoding: {encoding}",
                "file_parser",
                details={"file_path": str(path_obj), "encoding": encoding}
            )
            return result

    logger.warning("File could not be parsed", extra={"reason": error_message})
    processing_time = (time.time() - start_time) * MS_PER_SECOND
    return _create_error_result(
        error_message,
        config,
        correlation_id,
        processing_time,
        severity=DiagnosticSeverity.ERROR,
        details={"file_path": str(path_obj)}
    )


def diagnostic_node(message: str, config: Optional[ParserConfig] = None) -> Element:
    """Build the element that replaces the forest when parsing fails."""
    config = config or ParserConfig()
    return Element(
        tag="div",
        classes=list(config.diagnostics.error_classes),
        content=f"{config.diagnostics.message_prefix}: {message}",
    )


def _parse_source(
    source: Any,
    config: ParserConfig,
    correlation_id: Optional[str],
    classifier: Optional[LineClassifier] = None,
    builder: Optional[ThreadsTreeBuilder] = None
) -> ParseResult:
    """Run classification and tree building behind the fail-closed boundary.

    Args:
        source: Threads source (non-``str`` values yield an empty forest)
        config: Parser configuration
        correlation_id: Optional correlation ID for request tracking
        classifier: Classifier to reuse, created from ``config`` if omitted
        builder: Tree builder to reuse, created if omitted

    Returns:
        ParseResult with either the complete forest or the diagnostic node
    """
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse_source")
    result = ParseResult(correlation_id=correlation_id)

    if not isinstance(source, str):
        if source is not None:
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                f"Input of type {type(source).__name__} is not text - empty forest returned",
                "api_parser",
                details={"input_type": type(source).__name__}
            )
        return result

    try:
        classifier = classifier or LineClassifier(config, correlation_id)
        builder = builder or ThreadsTreeBuilder(LineGrammarParser(), correlation_id)

        classification = classifier.classify(source)
        discarded: List[ClassifiedLine] = []
        nodes = builder.build(classification, discarded)

        result.nodes = nodes
        result.line_count = classification.total_lines
        result.character_count = len(source)
        result.skipped_line_count = classification.skipped_total
        if config.global_.enable_performance_metrics:
            result.performance.characters_processed = len(source)
            result.performance.lines_processed = classification.total_lines
            result.performance.lines_skipped = classification.skipped_total
            result.performance.nodes_created = len(classification)

        for line in discarded:
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                "Line nested under text was discarded",
                "tree_builder",
                line_number=line.line_number,
                details={"text": line.text}
            )

        if not classification.lines:
            result.add_diagnostic(
                DiagnosticSeverity.INFO,
                "No content lines - empty forest returned",
                "api_parser",
                details={"total_lines": classification.total_lines}
            )

    except Exception as e:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        logger.exception(
            "Parse failed - substituting diagnostic node",
            extra={"processing_time_ms": processing_time}
        )
        failure = _create_error_result(
            str(e) or type(e).__name__,
            config,
            correlation_id,
            processing_time,
            details={"exception_type": type(e).__name__}
        )
        failure.line_count = source.count("\n") + 1 if source else 0
        failure.character_count = len(source)
        return failure

    processing_time = (time.time() - start_time) * MS_PER_SECOND
    result.performance.processing_time_ms = processing_time

    logger.info(
        "Parse completed",
        extra={
            "root_count": result.root_count,
            "lines_processed": result.line_count,
            "processing_time_ms": processing_time,
        }
    )
    return result


def _create_error_result(
    error_message: str,
    config: ParserConfig,
    correlation_id: Optional[str],
    processing_time: float,
    severity: DiagnosticSeverity = DiagnosticSeverity.CRITICAL,
    details: Optional[Dict[str, Any]] = None
) -> ParseResult:
    """Create the all-or-nothing failure result.

    Args:
        error_message: Error description shown inside the diagnostic node
        config: Parser configuration supplying the diagnostic node's shape
        correlation_id: Optional correlation ID
        processing_time: Processing time in milliseconds
        severity: ERROR when the source could not be read, CRITICAL when
            the pipeline itself failed
        details: Extra data for the diagnostic entry

    Returns:
        ParseResult holding exactly one diagnostic element
    """
    result = ParseResult(
        nodes=[diagnostic_node(error_message, config)],
        success=False,
        correlation_id=correlation_id,
    )
    result.performance.processing_time_ms = processing_time
    result.add_diagnostic(
        severity,
        error_message,
        "api_parser",
        details=details
    )
    return result


class ThreadsParser:
    """Reusable parser with a fixed configuration.

    Holds configuration, its stage objects and usage counters. The stages are
    stateless, so concurrent ``parse`` calls on one instance do not interfere
    with each other's forests; only the lock-guarded counters are shared.

    Examples:
        >>> parser = ThreadsParser()
        >>> forest = parser.parse(".card\\n  p Hello")
        >>> forest[0].classes
        ['card']
        >>> parser.statistics["total_parses"]
        1
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize parser.

        Args:
            config: Parser configuration (defaults to ``ParserConfig()``)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "threads_parser")

        self._classifier = LineClassifier(self.config, correlation_id)
        self._builder = ThreadsTreeBuilder(LineGrammarParser(), correlation_id)

        self._stats_lock = threading.Lock()
        self._parse_count = 0
        self._failed_parses = 0
        self._total_processing_time = 0.0

        self.logger.debug(
            "ThreadsParser initialized",
            extra={"config_name": self.config.name}
        )

    def parse(self, source: Any) -> List[Node]:
        """Parse ``source`` into a forest; never raises."""
        return self.parse_with_result(source).nodes

    def parse_with_result(
        self,
        source: Any,
        correlation_id_override: Optional[str] = None
    ) -> ParseResult:
        """Parse ``source`` and return the full result object.

        Args:
            source: Threads source text
            correlation_id_override: Optional correlation ID for this call only

        Returns:
            ParseResult with forest, diagnostics and metrics
        """
        result = _parse_source(
            source,
            self.config,
            correlation_id_override or self.correlation_id,
            classifier=self._classifier,
            builder=self._builder,
        )

        with self._stats_lock:
            self._parse_count += 1
            self._total_processing_time += result.processing_time_ms
            if not result.success:
                self._failed_parses += 1

        return result

    def reconfigure(self, config: ParserConfig) -> List[str]:
        """Replace the configuration used by subsequent parses.

        Returns:
            Settings that make the new configuration parse differently from
            the old one; each is also logged as a warning
        """
        changes = self.config.validate_compatibility(config)
        for change in changes:
            self.logger.warning(change, extra={"config_name": config.name})

        self.config = config
        self._classifier = LineClassifier(config, self.correlation_id)
        self.logger.info("Parser reconfigured", extra={"config_name": config.name})
        return changes

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        with self._stats_lock:
            count = self._parse_count
            failed = self._failed_parses
            total_time = self._total_processing_time

        successful = count - failed
        return {
            "total_parses": count,
            "successful_parses": successful,
            "failed_parses": failed,
            "success_rate": successful / count if count > 0 else 0.0,
            "total_processing_time_ms": total_time,
            "average_processing_time_ms": total_time / count if count > 0 else 0.0,
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        with self._stats_lock:
            self._parse_count = 0
            self._failed_parses = 0
            self._total_processing_time = 0.0
