"""Tests for the CLI main module."""

import io
import json
import logging
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from threads_parser.cli.main import (
    CLIConfig,
    ThreadsFileProcessor,
    create_argument_parser,
    format_outline,
    format_results,
    main,
)
from threads_parser.tree import Element, Text

PAGE = "section.bg-white.p-6\n  h1.text-3xl Hello\n  p Body text\n"


@pytest.fixture
def project(tmp_path):
    """A directory holding two Threads files and one unrelated file."""
    (tmp_path / "home.threads").write_text(PAGE, encoding="utf-8")
    nested = tmp_path / "parts"
    nested.mkdir()
    (nested / "nav.thr").write_text("nav#top\n  a.link Home\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("not a layout", encoding="utf-8")
    return tmp_path


class TestCLIConfig:
    """Test CLI configuration management."""

    def test_default_config(self):
        """Test default configuration values."""
        config = CLIConfig()
        assert config.output_format == "json"
        assert config.encoding == "utf-8"
        assert config.parser_config.name == "default"

    def test_config_from_file(self):
        """Test loading configuration from file."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            json.dump({
                "output_format": "outline",
                "encoding": "latin-1",
                "parser": {"indent": {"tab_width": 4}},
            }, f)
            config_path = Path(f.name)

        try:
            config = CLIConfig.from_file(config_path)
            assert config.output_format == "outline"
            assert config.encoding == "latin-1"
            assert config.parser_config.indent.tab_width == 4
        finally:
            config_path.unlink()

    def test_config_from_nonexistent_file(self):
        """Test handling non-existent config file."""
        config = CLIConfig.from_file(Path("nonexistent.json"))
        assert config.output_format == "json"

    def test_invalid_config_file_warns(self, tmp_path, capsys):
        """Test a broken config file falls back to defaults with a warning."""
        config_path = tmp_path / "broken.json"
        config_path.write_text("{not json", encoding="utf-8")

        config = CLIConfig.from_file(config_path)

        assert config.output_format == "json"
        assert "Warning: Could not load config file" in capsys.readouterr().err

    def test_invalid_parser_section_warns(self, tmp_path, capsys):
        """Test invalid parser settings are reported, not raised."""
        config_path = tmp_path / "bad.json"
        config_path.write_text(json.dumps({"parser": {"indent": {"tab_width": 0}}}))

        config = CLIConfig.from_file(config_path)

        assert config.parser_config.indent.tab_width == 2
        assert "Warning" in capsys.readouterr().err

    @pytest.mark.parametrize("payload", ["[1, 2]", "42", '"text"', '{"parser": [1]}'])
    def test_non_object_config_warns(self, tmp_path, capsys, payload):
        """Test config files that are not JSON objects fall back to defaults."""
        config_path = tmp_path / "odd.json"
        config_path.write_text(payload, encoding="utf-8")

        config = CLIConfig.from_file(config_path)

        assert config.output_format == "json"
        assert config.parser_config.name == "default"
        assert "Warning: Could not load config file" in capsys.readouterr().err


class TestThreadsFileProcessor:
    """Test file processing functionality."""

    def test_process_source(self):
        """Test describing an in-memory parse."""
        result = ThreadsFileProcessor(CLIConfig()).process_source(PAGE, "page")

        assert result["file"] == "page"
        assert result["success"] is True
        assert result["statistics"]["element_count"] == 3
        assert result["nodes"][0]["tag"] == "section"
        assert result["forest"][0].children[1].content == "Body text"

    def test_process_single_file(self, project):
        """Test processing one file from disk."""
        path = project / "home.threads"
        result = ThreadsFileProcessor(CLIConfig()).process_single_file(path)

        assert result["file"] == str(path)
        assert result["success"] is True
        assert "processing_time_ms" in result

    def test_process_unreadable_file(self, tmp_path):
        """Test read errors are reported in the result."""
        path = tmp_path / "bad.threads"
        path.write_bytes(b"\xff\xfe\xfa")

        result = ThreadsFileProcessor(CLIConfig()).process_single_file(path)

        assert result["success"] is False
        assert "error" in result

    def test_find_threads_files(self, project):
        """Test discovery filters by suffix and honours recursion."""
        processor = ThreadsFileProcessor(CLIConfig())

        recursive = [p.name for p in processor.find_threads_files(project, True)]
        flat = [p.name for p in processor.find_threads_files(project, False)]

        assert sorted(recursive) == ["home.threads", "nav.thr"]
        assert flat == ["home.threads"]

    def test_explicit_file_kept_regardless_of_suffix(self, project):
        """Test a named file is processed even without a Threads suffix."""
        processor = ThreadsFileProcessor(CLIConfig())

        assert list(processor.find_threads_files(project / "notes.txt")) == [
            project / "notes.txt"
        ]

    def test_batch_process_missing_path(self, tmp_path):
        """Test missing paths are reported in order."""
        results = ThreadsFileProcessor(CLIConfig()).batch_process(
            [tmp_path / "missing.threads"]
        )

        assert results == [{
            "file": str(tmp_path / "missing.threads"),
            "success": False,
            "error": "File not found",
            "nodes": [],
        }]

    def test_batch_process_stdin(self):
        """Test '-' reads source from standard input."""
        with patch("sys.stdin", io.StringIO("ul\n  li One")):
            results = ThreadsFileProcessor(CLIConfig()).batch_process([Path("-")])

        assert results[0]["file"] == "<stdin>"
        assert results[0]["nodes"][0]["children"][0]["content"] == "One"


class TestFormatting:
    """Test output formatting."""

    def test_format_outline(self):
        """Test outline rendering of elements and text."""
        forest = [
            Element(tag="section", classes=["a", "b"], id="main", children=[
                Element(tag="h1", content="Hello"),
                Text("plain words"),
            ]),
        ]

        assert format_outline(forest) == [
            "section.a.b#main",
            "  h1 Hello",
            '  "plain words"',
        ]

    def test_format_outline_void_elements(self):
        """Test void elements show neither content nor children."""
        forest = [Element(tag="img", classes=["logo"], content="ignored", children=[
            Element(tag="span", content="hidden"),
        ])]

        assert format_outline(forest) == ["img.logo"]

    def test_format_results_json_excludes_forest(self):
        """Test JSON output only holds serializable keys."""
        result = ThreadsFileProcessor(CLIConfig()).process_source("p Hi", "x")

        data = json.loads(format_results([result], "json"))

        assert "forest" not in data[0]
        assert data[0]["nodes"] == [{
            "type": "element",
            "tag": "p",
            "classes": [],
            "id": None,
            "content": "Hi",
            "children": [],
        }]

    def test_format_results_text(self):
        """Test text summary output."""
        processor = ThreadsFileProcessor(CLIConfig())
        results = [
            processor.process_source(PAGE, "page"),
            {"file": "gone", "success": False, "error": "File not found", "nodes": []},
        ]

        output = format_results(results, "text")

        assert "Processed 2 files, 1 successful" in output
        assert "✓ page" in output
        assert "✗ gone" in output
        assert "Elements: 3, Text: 0, Roots: 1, Depth: 2" in output
        assert "Error: File not found" in output

    def test_format_results_text_empty(self):
        """Test text output without results."""
        assert format_results([], "text") == "No results to display."

    def test_format_results_outline(self):
        """Test outline output is grouped per file."""
        result = ThreadsFileProcessor(CLIConfig()).process_source("div\n  p x", "a")

        assert format_results([result], "outline") == "# a\ndiv\n  p x"


class TestArgumentParser:
    """Test argument parsing."""

    def test_parse_command(self):
        """Test parse subcommand options."""
        args = create_argument_parser().parse_args(
            ["parse", "a.threads", "-f", "outline", "--tab-width", "4", "-r"]
        )

        assert args.command == "parse"
        assert args.paths == [Path("a.threads")]
        assert args.format == "outline"
        assert args.tab_width == 4
        assert args.recursive is True

    def test_stats_defaults_to_text(self):
        """Test stats subcommand default format."""
        args = create_argument_parser().parse_args(["stats", "a.threads"])

        assert args.format == "text"

    def test_invalid_format_rejected(self):
        """Test unknown output formats are rejected."""
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["parse", "a", "-f", "yaml"])


class TestMain:
    """Test the CLI entry point."""

    def test_no_command(self, capsys):
        """Test help is shown without a command."""
        assert main([]) == 1
        assert "threads-parse" in capsys.readouterr().out

    def test_parse_json(self, project, capsys):
        """Test parsing a file prints JSON."""
        exit_code = main(["-q", "parse", str(project / "home.threads")])

        data = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert data[0]["nodes"][0]["classes"] == ["bg-white", "p-6"]

    def test_parse_outline_directory(self, project, capsys):
        """Test outline output for a recursive directory parse."""
        exit_code = main(["-q", "parse", str(project), "-r", "-f", "outline"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "section.bg-white.p-6" in out
        assert "  a.link Home" in out

    def test_parse_missing_file_fails(self, tmp_path, capsys):
        """Test a missing path gives a non-zero exit code."""
        assert main(["-q", "parse", str(tmp_path / "nope.threads")]) == 1

    def test_parse_to_output_file(self, project, tmp_path, capsys):
        """Test writing results to a file."""
        out_path = tmp_path / "out.json"

        exit_code = main([
            "-q", "parse", str(project / "home.threads"), "-o", str(out_path)
        ])

        assert exit_code == 0
        assert json.loads(out_path.read_text(encoding="utf-8"))[0]["success"] is True
        assert "Results written to" in capsys.readouterr().err

    def test_parse_invalid_tab_width(self, project, capsys):
        """Test an invalid tab width is reported."""
        exit_code = main([
            "-q", "parse", str(project / "home.threads"), "--tab-width", "0"
        ])

        assert exit_code == 1
        assert "Invalid option" in capsys.readouterr().err

    def test_parse_with_config_file(self, project, tmp_path, capsys):
        """Test the config file selects the output format."""
        config_path = tmp_path / "cli.json"
        config_path.write_text(json.dumps({"output_format": "outline"}))

        main(["-q", "parse", str(project / "home.threads"), "-c", str(config_path)])

        assert "  h1.text-3xl Hello" in capsys.readouterr().out

    def test_config_logging_level_applied(self, project, tmp_path, capsys):
        """Test the configured logging level is used without -v or -q."""
        config_path = tmp_path / "cli.json"
        config_path.write_text(json.dumps({"parser": {"global_": {"logging_level": "ERROR"}}}))
        root = logging.getLogger()
        previous = root.level

        try:
            main(["parse", str(project / "home.threads"), "-c", str(config_path)])
            assert root.level == logging.ERROR
        finally:
            root.setLevel(previous)

    def test_quiet_flag_overrides_config_level(self, project, tmp_path, capsys):
        """Test -q keeps precedence over the configured level."""
        config_path = tmp_path / "cli.json"
        config_path.write_text(json.dumps({"parser": {"global_": {"logging_level": "DEBUG"}}}))
        root = logging.getLogger()
        previous = root.level

        try:
            main(["-q", "parse", str(project / "home.threads"), "-c", str(config_path)])
            assert root.level != logging.DEBUG
        finally:
            root.setLevel(previous)

    def test_stats_json(self, project, capsys):
        """Test stats output in JSON."""
        exit_code = main(["-q", "stats", str(project / "home.threads"), "-f", "json"])

        data = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert data[0]["element_count"] == 3
        assert data[0]["max_depth"] == 2

    def test_stats_text(self, project, capsys):
        """Test stats output in text."""
        main(["-q", "stats", str(project), "-r"])

        assert "Processed 2 files, 2 successful" in capsys.readouterr().out

    def test_keyboard_interrupt(self, project, capsys):
        """Test interruption exits with code 130."""
        with patch("threads_parser.cli.main.cmd_parse", side_effect=KeyboardInterrupt):
            assert main(["-q", "parse", str(project)]) == 130
        assert "interrupted" in capsys.readouterr().err
