"""Tests for the CLI main module."""

import io
import json
from unittest.mock import patch

import pytest

from xml_to_json.cli.main import (
    build_config,
    create_argument_parser,
    format_output,
    main,
)


class TestArgumentParser:
    """Test argument parsing and configuration mapping."""

    def test_defaults(self):
        """Test default option values."""
        args = create_argument_parser().parse_args([])

        assert args.path is None
        assert args.indent == 2
        assert args.compact is False
        assert args.max_depth is None
        assert args.no_trim is False
        assert args.output is None

    def test_verbose_and_quiet_exclusive(self):
        """Test that --verbose and --quiet cannot be combined."""
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["--verbose", "--quiet"])

    def test_build_config(self):
        """Test mapping options onto the converter configuration."""
        args = create_argument_parser().parse_args(["--no-trim", "--max-depth", "8"])

        config = build_config(args)

        assert config.reader.trim_text is False
        assert config.tree.max_depth == 8
        assert config.name == "cli"

    def test_format_output(self):
        """Test indented and compact output."""
        parser = create_argument_parser()
        value = {"a": ["x", None]}

        assert format_output(value, parser.parse_args(["--compact"])) == '{"a":["x",null]}'
        assert format_output(value, parser.parse_args(["--indent", "0"])) == (
            '{\n"a": [\n"x",\nnull\n]\n}'
        )

    def test_non_ascii_output(self):
        """Test that non-ASCII text is written as is."""
        args = create_argument_parser().parse_args(["--compact"])

        assert format_output({"e": "café"}, args) == '{"e":"café"}'


class TestMain:
    """Test the main entry point."""

    def test_convert_file(self, tmp_path, capsys):
        """Test converting a file to standard output."""
        path = tmp_path / "doc.xml"
        path.write_text('<e name="value">text</e>', encoding="utf-8")

        exit_code = main([str(path)])

        assert exit_code == 0
        assert json.loads(capsys.readouterr().out) == {
            "e": {"@name": "value", "#text": "text"}
        }

    def test_convert_stdin(self, capsys):
        """Test reading the document from standard input."""
        with patch("sys.stdin", io.StringIO("<e><a>x</a><a>y</a></e>")):
            exit_code = main(["--compact"])

        assert exit_code == 0
        assert capsys.readouterr().out == '{"e":{"a":["x","y"]}}\n'

    def test_no_trim(self, tmp_path, capsys):
        """Test that --no-trim keeps surrounding whitespace."""
        path = tmp_path / "doc.xml"
        path.write_text("<e> x </e>", encoding="utf-8")

        assert main(["--no-trim", "--compact", str(path)]) == 0
        assert capsys.readouterr().out == '{"e":" x "}\n'

    def test_output_file(self, tmp_path, capsys):
        """Test writing the JSON to a file."""
        source = tmp_path / "doc.xml"
        source.write_text("<e>foo</e>", encoding="utf-8")
        target = tmp_path / "out.json"

        exit_code = main([str(source), "--output", str(target)])

        assert exit_code == 0
        assert json.loads(target.read_text(encoding="utf-8")) == {"e": "foo"}
        assert "JSON written to" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        """Test that an unreadable input exits with status 1."""
        exit_code = main([str(tmp_path / "missing.xml")])

        assert exit_code == 1
        assert "Could not read input" in capsys.readouterr().err

    def test_depth_limit_exit_code(self, tmp_path, capsys):
        """Test that exceeding --max-depth exits with status 1."""
        path = tmp_path / "deep.xml"
        path.write_text("<a><b><c/></b></a>", encoding="utf-8")

        exit_code = main(["--max-depth", "2", str(path)])

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == ""
        assert "exceeds the maximum of 2" in captured.err

    def test_invalid_max_depth(self, capsys):
        """Test that a non-positive depth limit is rejected."""
        exit_code = main(["--max-depth", "0"])

        assert exit_code == 1
        assert "Invalid option" in capsys.readouterr().err

    def test_verbose_reports_diagnostics(self, tmp_path, capsys):
        """Test that --verbose prints repairs to standard error."""
        path = tmp_path / "broken.xml"
        path.write_text("<a><b>x</a>", encoding="utf-8")

        exit_code = main(["--verbose", str(path)])

        captured = capsys.readouterr()
        assert exit_code == 0
        assert json.loads(captured.out) == {"a": {"b": "x"}}
        assert "warning: 1:8: Auto-closed 1 unclosed elements before </a>" in captured.err

    def test_keyboard_interrupt(self):
        """Test handling of keyboard interrupt."""
        with patch("xml_to_json.cli.main.cmd_convert", side_effect=KeyboardInterrupt):
            exit_code = main(["doc.xml"])

        assert exit_code == 130  # Standard exit code for SIGINT

    def test_deep_document_exits_cleanly(self, tmp_path, capsys):
        """Test that nesting close to the depth limit never escapes as a traceback."""
        depth = 999
        path = tmp_path / "deep.xml"
        path.write_text("<a>" * depth + "</a>" * depth, encoding="utf-8")

        for options in ([], ["--compact"]):
            exit_code = main(options + [str(path)])

            captured = capsys.readouterr()
            assert exit_code in (0, 1)
            if exit_code == 0:
                assert captured.out.startswith('{')
            else:
                assert captured.out == ""
                assert "too deep to serialize as JSON" in captured.err

    def test_serialization_recursion_exit_code(self, tmp_path, capsys):
        """Test that a value json cannot serialize exits with status 1."""
        path = tmp_path / "doc.xml"
        path.write_text("<a><b/></a>", encoding="utf-8")

        with patch("xml_to_json.cli.main.format_output", side_effect=RecursionError):
            exit_code = main([str(path)])

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == ""
        assert "Converted value reaches depth 2, too deep to serialize as JSON" in captured.err
