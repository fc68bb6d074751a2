"""Command-line interface for lispexer."""

from __future__ import annotations

import argparse
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from lispexer.diagnostics import Diagnostic

DEFAULT_INPUT = "arithmetic.txt"
CONFIG_NAME = "lispexer.toml"
POLL_INTERVAL = 0.5


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    tokens: bool
    debug: bool
    color: bool
    watch: bool


@dataclass(frozen=True, slots=True)
class RunResult:
    """Outcome of one pass over the input file."""

    results: list[int | None]
    diagnostics: list[Diagnostic]

    @property
    def ok(self) -> bool:
        return bool(self.results) and all(r is not None for r in self.results)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="lispexer",
        description="Evaluate (+ ...) and (- a b) forms from a Lisp-notation file",
    )
    p.add_argument(
        "input",
        nargs="?",
        default=DEFAULT_INPUT,
        help=f"Input file (default: {DEFAULT_INPUT})",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument(
        "--tokens",
        action="store_true",
        default=None,
        help="Dump tokens to stderr",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Dump the tree to stderr",
    )
    p.add_argument(
        "--color",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Colour MALFORMED tokens in dumps",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and re-evaluate")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    flags = {"tokens": False, "debug": False, "color": False}
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        for key in flags:
            value = cfg_output.get(key)
            if isinstance(value, bool):
                flags[key] = value
    for key in flags:
        value = getattr(args, key)
        if value is not None:
            flags[key] = value

    return CliOptions(
        input_file=input_file,
        tokens=flags["tokens"],
        debug=flags["debug"],
        color=flags["color"],
        watch=args.watch,
    )


def read_source(path: Path) -> str:
    """Read the whole file. Bytes that are not valid UTF-8 become U+FFFD."""
    return path.read_bytes().decode("utf-8", errors="replace")


def run_file(
    options: CliOptions,
    *,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> RunResult:
    """Read, build and evaluate the input file, printing results and diagnostics.

    Raises OSError if the file cannot be read.
    """
    from lispexer.builder import build
    from lispexer.classify import tokenize
    from lispexer.debug import dump_tokens, dump_tree
    from lispexer.eval import evaluate_all

    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr
    source = read_source(options.input_file)
    filename = str(options.input_file)
    diagnostics: list[Diagnostic] = []

    if options.tokens:
        dump_tokens(tokenize(source, filename), file=err, color=options.color)

    root = build(source, filename, diagnostics)

    if options.debug:
        dump_tree(root, file=err, color=options.color)

    leaves = evaluate_all(root, diagnostics)

    for diag in diagnostics:
        print(diag.format(source, filename), file=err)

    results: list[int | None] = []
    for leaf in leaves:
        if leaf is None:
            results.append(None)
            print("not a value", file=out)
        else:
            results.append(leaf.value)  # type: ignore[arg-type]
            print(leaf.value, file=out)

    return RunResult(results, diagnostics)


def run_once(options: CliOptions) -> int:
    """Run the input once and map the outcome to an exit code."""
    try:
        result = run_file(options)
    except OSError as exc:
        print(f"error: unable to open file: {exc}", file=sys.stderr)
        return 1
    return 0 if result.ok else 2


def _mtime(path: Path) -> float | None:
    try:
        return path.stat().st_mtime
    except OSError:
        return None


def watch_loop(options: CliOptions, *, interval: float = POLL_INTERVAL) -> None:
    """Re-run the input every time its mtime changes, until interrupted."""
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    seen: float | None = None
    try:
        while True:
            mtime = _mtime(options.input_file)
            if mtime is not None and mtime != seen:
                seen = mtime
                run_once(options)
                sys.stdout.flush()
            time.sleep(interval)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config: {exc}", file=sys.stderr)
        return 2

    if options.watch:
        watch_loop(options)
        return 0

    return run_once(options)
