"""Developer tools for the Threads parser."""

from .benchmarks import BenchmarkResult, BenchmarkSuite, ParseBenchmark

__all__ = [
    "BenchmarkResult",
    "BenchmarkSuite",
    "ParseBenchmark",
]
