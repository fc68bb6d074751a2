"""Tests for the CLI module: arg parsing, exit codes, output, end-to-end."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from lispexer.cli import CliOptions, RunResult, build_parser, main, run_file, run_once

# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_default_input(self) -> None:
        ns = build_parser().parse_args([])
        assert ns.input == "arithmetic.txt"

    def test_input(self) -> None:
        ns = build_parser().parse_args(["forms.txt"])
        assert ns.input == "forms.txt"

    def test_flags_unset_are_none(self) -> None:
        ns = build_parser().parse_args(["x.txt"])
        assert ns.tokens is None
        assert ns.debug is None
        assert ns.color is None
        assert ns.watch is False

    def test_dump_flags(self) -> None:
        ns = build_parser().parse_args(["x.txt", "--tokens", "--debug", "--no-color"])
        assert ns.tokens is True
        assert ns.debug is True
        assert ns.color is False

    def test_watch(self) -> None:
        ns = build_parser().parse_args(["x.txt", "--watch"])
        assert ns.watch is True


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, tmp_path: Path) -> None:
        src = tmp_path / "ok.txt"
        src.write_text("(+ 1 2)\n")
        assert main([str(src)]) == 0

    def test_missing_file_returns_1(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(tmp_path / "nope.txt")]) == 1
        assert "error: unable to open file" in capsys.readouterr().err

    def test_not_a_value_returns_2(self, tmp_path: Path) -> None:
        src = tmp_path / "bad.txt"
        src.write_text("(- 1 2 3)\n")
        assert main([str(src)]) == 2

    def test_empty_file_returns_2(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = tmp_path / "empty.txt"
        src.write_text("   \n")
        assert main([str(src)]) == 2
        assert "no expression to evaluate" in capsys.readouterr().err

    def test_invalid_config_returns_2(self, tmp_path: Path) -> None:
        src = tmp_path / "ok.txt"
        src.write_text("(+ 1 2)\n")
        (tmp_path / "lispexer.toml").write_text("[output\n")
        assert main([str(src)]) == 2


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class TestOutput:
    def test_results_on_stdout(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = tmp_path / "forms.txt"
        src.write_text("(+ (- 8 3) 2)\n(* 1 2)\n")
        assert main([str(src)]) == 2
        captured = capsys.readouterr()
        assert captured.out == "7\nnot a value\n"
        assert "unsupported operator '*'" in captured.err
        assert f"{src}:2:2" in captured.err

    def test_debug_dumps_tree_to_stderr(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "t.txt"
        src.write_text("(+ 1 2)")
        main([str(src), "--debug"])
        captured = capsys.readouterr()
        assert "| int: 1" in captured.err
        assert captured.out == "3\n"

    def test_tokens_dump(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = tmp_path / "t.txt"
        src.write_text("(+ 1 2)")
        main([str(src), "--tokens"])
        assert "1:2 ident: +" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# run_file smoke test
# ---------------------------------------------------------------------------


class TestRunFile:
    def test_basic(self, tmp_path: Path) -> None:
        src = tmp_path / "simple.txt"
        src.write_text("(- 10 4)\n")
        opts = CliOptions(input_file=src, tokens=False, debug=False, color=False, watch=False)
        out = io.StringIO()
        err = io.StringIO()
        result = run_file(opts, out=out, err=err)
        assert result == RunResult([6], [])
        assert result.ok
        assert out.getvalue() == "6\n"
        assert err.getvalue() == ""

    def test_malformed_reported(self, tmp_path: Path) -> None:
        src = tmp_path / "m.txt"
        src.write_text('(+ 1 2) "')
        opts = CliOptions(input_file=src, tokens=False, debug=False, color=False, watch=False)
        err = io.StringIO()
        result = run_file(opts, out=io.StringIO(), err=err)
        assert result.results == [3]
        assert "string literal should be at least 2 characters long" in err.getvalue()

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        opts = CliOptions(
            input_file=tmp_path / "missing.txt",
            tokens=False,
            debug=False,
            color=False,
            watch=False,
        )
        with pytest.raises(OSError):
            run_file(opts)


# ---------------------------------------------------------------------------
# Source decoding
# ---------------------------------------------------------------------------


class TestSourceDecoding:
    def test_latin1_bytes_in_string_literal(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "latin1.txt"
        src.write_bytes(b'(+ 1 2) "caf\xe9"\n')
        # a bare string is not a form, so only exit code 1 would mean a fatal read
        assert main([str(src), "--debug"]) == 2
        captured = capsys.readouterr()
        assert captured.out == "3\nnot a value\n"
        assert "expected a list at top level" in captured.err
        assert "unable to open file" not in captured.err
        assert "string: caf�" in captured.err

    def test_invalid_bytes_inside_form(self, tmp_path: Path) -> None:
        src = tmp_path / "bytes.txt"
        src.write_bytes(b"(- 10 \xff)\n")
        # the replacement character is an identifier, not an integer
        assert main([str(src)]) == 2

    def test_run_once_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        opts = CliOptions(
            input_file=tmp_path / "gone.txt",
            tokens=False,
            debug=False,
            color=False,
            watch=False,
        )
        assert run_once(opts) == 1
        assert "error: unable to open file" in capsys.readouterr().err
