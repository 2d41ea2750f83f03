"""Public parsing API for the Threads layout dialect."""

from .parser import (
    ThreadsParser,
    diagnostic_node,
    parse,
    parse_file,
    parse_string,
)

__all__ = [
    "ThreadsParser",
    "diagnostic_node",
    "parse",
    "parse_file",
    "parse_string",
]
