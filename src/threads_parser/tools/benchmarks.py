"""Performance benchmarking for Threads parsing.

The editor re-parses the whole document on every content change, so parse
time and memory must grow linearly with document size. This module runs
generated documents of different shapes through ``parse_string`` and reports
throughput and resident-memory growth.
"""

import gc
import statistics
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import psutil

from threads_parser.api import ThreadsParser
from threads_parser.shared import ParserConfig, get_logger

EDITOR_SAMPLE = """section.bg-white.p-6.text-center
  h1.text-3xl.font-bold Hello, Layout Editor!
  p.text-gray-600 Start typing your layout here...

  .mt-8.grid.grid-cols-2.gap-4
    .bg-blue-50.p-4.rounded-lg
      h3.font-semibold Welcome to Spindle
      p.text-sm.text-gray-600 Build layouts with Threads syntax

    .bg-green-50.p-4.rounded-lg
      h3.font-semibold Live Preview
      p.text-sm.text-gray-600 See your changes in real-time"""


@dataclass
class BenchmarkResult:
    """Result of a single benchmark run."""

    test_case: str
    processing_time_ms: float
    memory_used_mb: float
    characters_processed: int
    nodes_created: int
    success: bool
    error_message: Optional[str] = None

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def ms_per_thousand_characters(self) -> float:
        if self.characters_processed <= 0:
            return 0.0
        return self.processing_time_ms * 1000.0 / self.characters_processed


@dataclass
class BenchmarkSuite:
    """Collection of benchmark results with statistical analysis."""

    results: List[BenchmarkResult] = field(default_factory=list)
    suite_name: str = "Threads Parse Benchmark"
    timestamp: float = field(default_factory=time.time)

    def add_result(self, result: BenchmarkResult) -> None:
        self.results.append(result)

    def get_results_by_test_case(self, test_case: str) -> List[BenchmarkResult]:
        return [r for r in self.results if r.test_case == test_case]

    def get_statistics(self, test_case: str, metric: str) -> Dict[str, float]:
        """Get min/max/mean/median/stdev of ``metric`` for one test case."""
        values = [
            getattr(result, metric)
            for result in self.get_results_by_test_case(test_case)
            if result.success
        ]
        if not values:
            return {}

        return {
            "min": min(values),
            "max": max(values),
            "mean": statistics.mean(values),
            "median": statistics.median(values),
            "stdev": statistics.stdev(values) if len(values) > 1 else 0.0,
            "count": len(values),
        }

    def generate_report(self) -> Dict[str, Any]:
        """Generate benchmark report grouped by test case."""
        test_cases = sorted(set(r.test_case for r in self.results))
        report: Dict[str, Any] = {
            "suite_name": self.suite_name,
            "timestamp": self.timestamp,
            "total_results": len(self.results),
            "test_cases": test_cases,
            "summary": {},
        }

        for test_case in test_cases:
            case_results = self.get_results_by_test_case(test_case)
            successful = [r for r in case_results if r.success]
            report["summary"][test_case] = {
                "total_runs": len(case_results),
                "successful_runs": len(successful),
                "characters": case_results[0].characters_processed,
                "nodes": case_results[0].nodes_created,
                "time_ms": self.get_statistics(test_case, "processing_time_ms"),
                "throughput": self.get_statistics(test_case, "characters_per_second"),
                "memory_mb": self.get_statistics(test_case, "memory_used_mb"),
            }

        return report


class ParseBenchmark:
    """Benchmark of the full parse pipeline."""

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
        warmup_runs: int = 2,
        benchmark_runs: int = 5
    ) -> None:
        """Initialize benchmark.

        Args:
            config: Parser configuration under test
            correlation_id: Optional correlation ID for tracking
            warmup_runs: Number of warmup runs before benchmarking
            benchmark_runs: Number of measured runs per test case
        """
        if warmup_runs < 0:
            raise ValueError("warmup_runs must be >= 0")
        if benchmark_runs <= 0:
            raise ValueError("benchmark_runs must be > 0")

        self.correlation_id = correlation_id
        self.warmup_runs = warmup_runs
        self.benchmark_runs = benchmark_runs
        self.logger = get_logger(__name__, correlation_id, "benchmark")
        self.parser = ThreadsParser(config=config, correlation_id=correlation_id)

        self.test_cases = self.create_test_cases()

    def create_test_cases(self, scale: int = 1) -> Dict[str, str]:
        """Create documents of different shapes, ``scale`` times the base size."""
        return {
            "editor_sample": EDITOR_SAMPLE,
            "flat": generate_flat_document(500 * scale),
            "deep_nesting": generate_nested_document(200 * scale),
            "wide_sections": generate_sections_document(50 * scale, 10),
            "long_lines": generate_long_line_document(50 * scale, 2000),
            "comment_heavy": generate_comment_heavy_document(300 * scale),
        }

    def _measure_memory_usage(self) -> float:
        """Get current resident memory in MB."""
        process = psutil.Process()
        return process.memory_info().rss / 1024 / 1024

    def benchmark_source(self, test_case: str, source: str) -> BenchmarkResult:
        """Parse ``source`` once and measure it."""
        gc.collect()
        memory_before = self._measure_memory_usage()
        start_time = time.time()

        result = self.parser.parse_with_result(source)

        processing_time = (time.time() - start_time) * 1000
        memory_after = self._measure_memory_usage()

        failure = None
        if not result.success:
            failure = result.diagnostics[-1].message if result.diagnostics else "unknown"

        return BenchmarkResult(
            test_case=test_case,
            processing_time_ms=processing_time,
            memory_used_mb=max(0.0, memory_after - memory_before),
            characters_processed=len(source),
            nodes_created=result.node_count,
            success=result.success,
            error_message=failure,
        )

    def run_benchmark(self) -> BenchmarkSuite:
        """Run every test case ``benchmark_runs`` times after warming up."""
        suite = BenchmarkSuite()

        self.logger.info(
            "Starting parse benchmark",
            extra={
                "test_cases": len(self.test_cases),
                "warmup_runs": self.warmup_runs,
                "benchmark_runs": self.benchmark_runs,
            }
        )

        for test_case, source in self.test_cases.items():
            for _ in range(self.warmup_runs):
                self.parser.parse(source)
            for _ in range(self.benchmark_runs):
                suite.add_result(self.benchmark_source(test_case, source))

        self.logger.info("Parse benchmark completed", extra={"results": len(suite.results)})
        return suite

    def measure_scaling(self, scales: Optional[List[int]] = None) -> Dict[str, List[float]]:
        """Median ms per 1000 characters for each test case at each scale.

        Roughly constant values across scales indicate linear behavior.
        """
        scales = scales or [1, 2, 4]
        scaling: Dict[str, List[float]] = {}
        for scale in scales:
            for test_case, source in self.create_test_cases(scale).items():
                if test_case == "editor_sample":
                    continue
                runs = [
                    self.benchmark_source(test_case, source).ms_per_thousand_characters
                    for _ in range(self.benchmark_runs)
                ]
                scaling.setdefault(test_case, []).append(statistics.median(runs))
        return scaling


def generate_flat_document(count: int) -> str:
    """``count`` sibling paragraphs under one section."""
    lines = ["section.container"]
    for i in range(count):
        lines.append(f"  p.item.item-{i} Paragraph number {i}")
    return "\n".join(lines)


def generate_nested_document(depth: int) -> str:
    """A single chain of ``depth`` nested divs, one space per level."""
    return "\n".join(f"{' ' * level}div.level-{level} Level {level}" for level in range(depth))


def generate_sections_document(sections: int, items: int) -> str:
    """Repeated section/list structures that open and close many levels."""
    lines = []
    for s in range(sections):
        lines.append(f"section#s{s}.py-4")
        lines.append(f"  h2.font-bold Section {s}")
        lines.append("  ul.list-disc")
        for i in range(items):
            lines.append(f"    li.ml-4 Item {i}")
            lines.append(f"      span.text-xs detail {i}")
        lines.append(f"  Plain text closing section {s}")
    return "\n".join(lines)


def generate_long_line_document(count: int, line_length: int) -> str:
    """Paragraphs whose inline content is ``line_length`` characters long."""
    body = ("lorem ipsum " * (line_length // 12 + 1))[:line_length]
    return "\n".join(f"p.text-sm {body}" for _ in range(count))


def generate_comment_heavy_document(count: int) -> str:
    """Content lines interleaved with comments and blank lines."""
    lines = ["main"]
    for i in range(count):
        lines.append(f"  // comment {i}")
        lines.append("")
        lines.append(f"  article.card Card {i}")
    return "\n".join(lines)
