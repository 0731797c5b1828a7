"""Vie CLI: compile .vie files and run them with Node.js."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import tempfile

from . import compile_program, format_error, parse
from .errors import CompileError
from .serialize import to_json
from .tokens import tokenize

logger = logging.getLogger(__name__)

USAGE: str = """\
vie [OPTIONS] FILE

Compile a Vie (.vie) program to JavaScript and run it with Node.js.

Options:
  --stop-at PHASE     Print the result of a phase instead of running:
                      tokenize, parse, generate
  -o, --output FILE   Write the output to FILE instead of running it
  --node PATH         Node.js executable (default: $VIE_NODE or 'node')
  -v, --verbose       Log pipeline progress to stderr
  -h, --help          Show this help message
"""

PHASES: list[str] = ["tokenize", "parse", "generate"]

NODE_ENV_VAR: str = "VIE_NODE"


class Options:
    """Parsed command-line options."""

    def __init__(self) -> None:
        self.filepath: str = ""
        self.stop_at: str | None = None
        self.output_file: str | None = None
        self.node: str = os.environ.get(NODE_ENV_VAR) or "node"
        self.verbose: bool = False


def parse_args(args: list[str]) -> tuple[Options | None, int]:
    """Parse arguments. Returns (options, exit_code); options is None to exit."""
    opts = Options()
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return (None, 0)
        elif arg in ("--stop-at", "-o", "--output", "--node"):
            if i + 1 >= len(args):
                print("vie: " + arg + " requires an argument", file=sys.stderr)
                return (None, 2)
            value = args[i + 1]
            if arg == "--stop-at":
                if value not in PHASES:
                    print("vie: unknown phase '" + value + "'", file=sys.stderr)
                    return (None, 2)
                opts.stop_at = value
            elif arg == "--node":
                opts.node = value
            else:
                opts.output_file = value
            i += 2
        elif arg == "--verbose" or arg == "-v":
            opts.verbose = True
            i += 1
        elif arg.startswith("-") and arg != "-":
            print("vie: unknown flag '" + arg + "'", file=sys.stderr)
            return (None, 2)
        elif opts.filepath == "":
            opts.filepath = arg
            i += 1
        else:
            print("vie: unexpected argument '" + arg + "'", file=sys.stderr)
            return (None, 2)
    if opts.filepath == "":
        print("vie: missing file argument", file=sys.stderr)
        print(USAGE, end="", file=sys.stderr)
        return (None, 1)
    return (opts, 0)


def read_source(filepath: str) -> str | None:
    """Read a UTF-8 source file, reporting failures on stderr."""
    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        print("vie: " + filepath + ": No such file or directory", file=sys.stderr)
        return None
    except OSError as e:
        print("vie: " + filepath + ": " + str(e), file=sys.stderr)
        return None
    try:
        return raw.decode("utf-8")
    except ValueError:
        print("vie: " + filepath + ": invalid utf-8", file=sys.stderr)
        return None


def write_output(output: str, output_file: str | None) -> int:
    """Write output to file or stdout. Returns 0 on success, 1 on error."""
    if output_file is None:
        print(output)
        return 0
    try:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(output)
    except OSError:
        print("vie: cannot write '" + output_file + "'", file=sys.stderr)
        return 1
    return 0


def run_with_node(code: str, node: str) -> int:
    """Run a JavaScript program with Node.js, inheriting stdio."""
    with tempfile.TemporaryDirectory(prefix="vie-") as tmp:
        path = os.path.join(tmp, "program.js")
        with open(path, "w", encoding="utf-8") as f:
            f.write(code)
        logger.debug("running %s %s", node, path)
        try:
            result = subprocess.run([node, path])
        except FileNotFoundError:
            print("vie: cannot run '" + node + "': not found", file=sys.stderr)
            return 1
    return result.returncode


def compile_phase(source: str, stop_at: str | None) -> str:
    """Run the pipeline up to `stop_at` and render that phase's output."""
    if stop_at == "tokenize":
        return to_json(tokenize(source))
    if stop_at == "parse":
        return to_json(parse(source))
    return compile_program(source)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    opts, code = parse_args(argv if argv is not None else sys.argv[1:])
    if opts is None:
        return code
    logging.basicConfig(
        level=logging.DEBUG if opts.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )
    source = read_source(opts.filepath)
    if source is None:
        return 1
    try:
        output = compile_phase(source, opts.stop_at)
    except CompileError as e:
        print(format_error(e, source), file=sys.stderr)
        return 1
    except TypeError as e:
        print("vie: internal compiler error: " + str(e), file=sys.stderr)
        return 1
    except RecursionError:
        print("vie: " + opts.filepath + ": program is nested too deeply", file=sys.stderr)
        return 1
    if opts.stop_at is not None or opts.output_file is not None:
        return write_output(output, opts.output_file)
    return run_with_node(output, opts.node)


if __name__ == "__main__":
    sys.exit(main())
