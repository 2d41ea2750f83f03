"""Main CLI entry point for the threads-parse command-line tool.

Parses ``.threads`` layout files and prints the resulting forest, an
indented outline of it, or per-file statistics.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from threads_parser import __version__
from threads_parser.api import ThreadsParser
from threads_parser.shared.config import ParserConfig
from threads_parser.shared.exceptions import ConfigError
from threads_parser.shared.logging import get_logger
from threads_parser.tree import Element, Node, ParseResult, forest_to_dicts

THREADS_SUFFIXES = {".threads", ".thr"}
STDIN_PATH = "-"


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.parser_config = ParserConfig.default()
        self.output_format = "json"
        self.encoding = "utf-8"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        Recognised keys: ``parser`` (a ParserConfig dictionary),
        ``output_format`` and ``encoding``.
        """
        config = cls()
        if not config_path.exists():
            return config

        try:
            with config_path.open() as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ConfigError("Configuration file must contain a JSON object")
            if "parser" in data:
                if not isinstance(data["parser"], dict):
                    raise ConfigError("\"parser\" must be a JSON object")
                config.parser_config = ParserConfig.from_dict(data["parser"])
            config.output_format = data.get("output_format", config.output_format)
            config.encoding = data.get("encoding", config.encoding)
        except (OSError, json.JSONDecodeError, ConfigError) as e:
            print(f"Warning: Could not load config file: {e}", file=sys.stderr)

        return config


class ThreadsFileProcessor:
    """Core file processing logic for CLI operations."""

    def __init__(self, config: CLIConfig):
        self.config = config
        self.parser = ThreadsParser(config=config.parser_config)
        self.logger = get_logger(__name__, None, "cli_processor")

    def process_source(self, source: str, name: str) -> Dict[str, Any]:
        """Parse in-memory source and describe the outcome."""
        return self._describe(name, self.parser.parse_with_result(source))

    def process_single_file(self, file_path: Path) -> Dict[str, Any]:
        """Parse a single file and describe the outcome."""
        try:
            source = file_path.read_text(encoding=self.config.encoding)
        except (OSError, UnicodeDecodeError) as e:
            self.logger.warning("Failed to read file", extra={"file": str(file_path)})
            return {
                "file": str(file_path),
                "success": False,
                "error": str(e),
                "nodes": [],
            }
        return self.process_source(source, str(file_path))

    def _describe(self, name: str, result: ParseResult) -> Dict[str, Any]:
        return {
            "file": name,
            "success": result.success,
            "statistics": result.statistics,
            "processing_time_ms": result.processing_time_ms,
            "diagnostics": [diag.to_dict() for diag in result.diagnostics],
            "nodes": forest_to_dicts(result.nodes),
            "forest": result.nodes,
        }

    def find_threads_files(self, path: Path, recursive: bool = True) -> Iterator[Path]:
        """Find Threads files in path; explicitly named files are always kept."""
        if path.is_file():
            yield path
        elif path.is_dir():
            pattern = "**/*" if recursive else "*"
            for candidate in sorted(path.glob(pattern)):
                if candidate.is_file() and candidate.suffix.lower() in THREADS_SUFFIXES:
                    yield candidate

    def batch_process(self, paths: List[Path], recursive: bool = True) -> List[Dict[str, Any]]:
        """Process files, directories and ``-`` (stdin) in the order given."""
        results = []
        for path in paths:
            if str(path) == STDIN_PATH:
                results.append(self.process_source(sys.stdin.read(), "<stdin>"))
                continue
            if not path.exists():
                results.append({
                    "file": str(path),
                    "success": False,
                    "error": "File not found",
                    "nodes": [],
                })
                continue
            for file_path in self.find_threads_files(path, recursive):
                results.append(self.process_single_file(file_path))
        return results


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="threads-parse",
        description="Parse Threads layout markup into element trees"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Parse Threads files")
    parse_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Threads files or directories to parse ('-' reads stdin)"
    )
    parse_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    parse_parser.add_argument(
        "--format", "-f",
        choices=["json", "text", "outline"],
        default=None,
        help="Output format (default: json)"
    )
    parse_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    parse_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    parse_parser.add_argument(
        "--tab-width",
        type=int,
        help="Indentation depth of one leading tab (default: 2)"
    )

    stats_parser = subparsers.add_parser("stats", help="Show document statistics")
    stats_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Threads files or directories ('-' reads stdin)"
    )
    stats_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    stats_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def format_outline(nodes: List[Node], depth: int = 0) -> List[str]:
    """Render a forest as an indented outline, two spaces per level."""
    lines = []
    pad = "  " * depth
    for node in nodes:
        if isinstance(node, Element):
            selector = node.tag + "".join(f".{cls}" for cls in node.classes)
            if node.id is not None:
                selector += f"#{node.id}"
            # Void elements render without content or children
            if node.is_void:
                lines.append(f"{pad}{selector}")
                continue
            lines.append(f"{pad}{selector} {node.content}".rstrip())
            lines.extend(format_outline(node.children, depth + 1))
        else:
            lines.append(f'{pad}"{node.content}"')
    return lines


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format processing results for output."""
    if format_type == "outline":
        sections = []
        for result in results:
            lines = [f"# {result['file']}"]
            if "error" in result:
                lines.append(f"Error: {result['error']}")
            else:
                lines.extend(format_outline(result["forest"]))
            sections.append("\n".join(lines))
        return "\n\n".join(sections)

    if format_type == "text":
        if not results:
            return "No results to display."

        successful = sum(1 for r in results if r.get("success", False))
        lines = [f"Processed {len(results)} files, {successful} successful", "-" * 60]

        for result in results:
            status = "✓" if result.get("success", False) else "✗"
            lines.append(f"{status} {result['file']}")
            if "error" in result:
                lines.append(f"   Error: {result['error']}")
            else:
                stats = result["statistics"]
                lines.append(
                    f"   Elements: {stats['element_count']}, "
                    f"Text: {stats['text_count']}, "
                    f"Roots: {stats['root_count']}, "
                    f"Depth: {stats['max_depth']}"
                )
                lines.append(
                    f"   Lines: {stats['line_count']}, "
                    f"Chars: {stats['character_count']}, "
                    f"Time: {result['processing_time_ms']:.1f}ms"
                )
                errors = [
                    d for d in result.get("diagnostics", [])
                    if d.get("severity") in ["ERROR", "CRITICAL"]
                ]
                for error in errors[:3]:
                    lines.append(f"   Error: {error.get('message', '')}")
            lines.append("")

        return "\n".join(lines)

    serializable = [
        {key: value for key, value in result.items() if key != "forest"}
        for result in results
    ]
    return json.dumps(serializable, indent=2, ensure_ascii=False)


def _exit_code(results: List[Dict[str, Any]]) -> int:
    if not results:
        return 1
    successful = sum(1 for r in results if r.get("success", False))
    return 0 if successful == len(results) else 1


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    config = CLIConfig()
    if args.config:
        config = CLIConfig.from_file(args.config)

    if not (args.verbose or args.quiet):
        logging.getLogger().setLevel(config.parser_config.global_.logging_level)

    if args.tab_width is not None:
        try:
            config.parser_config = config.parser_config.override(
                indent__tab_width=args.tab_width
            )
        except ConfigError as e:
            print(f"Invalid option: {e}", file=sys.stderr)
            return 1

    output_format = args.format or config.output_format

    processor = ThreadsFileProcessor(config)
    results = processor.batch_process(args.paths, args.recursive)

    formatted_output = format_results(results, output_format)

    if args.output:
        try:
            args.output.write_text(formatted_output, encoding="utf-8")
            print(f"Results written to {args.output}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(formatted_output)

    return _exit_code(results)


def cmd_stats(args: argparse.Namespace) -> int:
    """Handle stats command."""
    processor = ThreadsFileProcessor(CLIConfig())
    results = processor.batch_process(args.paths, args.recursive)

    if args.format == "json":
        print(json.dumps(
            [
                {
                    "file": r["file"],
                    "success": r["success"],
                    **({"error": r["error"]} if "error" in r else r["statistics"]),
                }
                for r in results
            ],
            indent=2
        ))
    else:
        print(format_results(results, "text"))

    return _exit_code(results)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        if args.command == "parse":
            return cmd_parse(args)
        elif args.command == "stats":
            return cmd_stats(args)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
