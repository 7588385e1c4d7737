#!/usr/bin/env python3
"""CLI: read robot commands from a file or stdin, run them, print reports."""

import argparse
import json
import sys
from typing import Dict, List, Optional, TextIO

from command_parser import ParseError, parse_stream
from data_types import TABLE_HEIGHT, TABLE_WIDTH, Instruction
from simulator import World, run_instructions


def load_instructions(path: Optional[str], prog: str, verbose: bool = False) -> List[Instruction]:
    if path is None:
        print("Press CTRL+D to exit input and run", file=sys.stderr)
        # Undecodable bytes become U+FFFD and fail as unknown characters
        if hasattr(sys.stdin, "reconfigure"):
            sys.stdin.reconfigure(errors="replace")
        return parse_stream(sys.stdin, verbose=verbose)
    try:
        f = open(path, "r", encoding="utf-8", errors="replace")
    except OSError:
        print(f"{prog}: Failed to open {path} for reading", file=sys.stderr)
        sys.exit(1)
    with f:
        return parse_stream(f, verbose=verbose)


def write_trace(path: str, instructions: List[Instruction], steps: List[Dict], reports: List[str]) -> None:
    output = {
        "table": {"width": TABLE_WIDTH + 1, "height": TABLE_HEIGHT + 1},
        "instructions": len(instructions),
        "steps": steps,
        "reports": reports,
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(output, f, indent=2)


def run(instructions: List[Instruction], out: TextIO, trace_path: Optional[str] = None, verbose: bool = False) -> List[str]:
    world = World()
    steps: Optional[List[Dict]] = [] if trace_path else None

    def emit(line: str) -> None:
        print(line, file=out)

    reports = run_instructions(world, instructions, emit=emit, trace=steps, verbose=verbose)
    if trace_path:
        write_trace(trace_path, instructions, steps, reports)
        if verbose:
            print(f"[trace] {len(steps)} steps written to {trace_path}", file=sys.stderr)
    return reports


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Simulate toy robots on a 5x5 table")
    parser.add_argument("commands", nargs="?", default=None, help="Command file (default: read stdin)")
    parser.add_argument("--trace", default=None, help="Write a JSON trace of every executed step")
    parser.add_argument("--verbose", action="store_true", help="Print parse/exec summaries to stderr")
    args = parser.parse_args(argv)

    try:
        instructions = load_instructions(args.commands, parser.prog, verbose=args.verbose)
        run(instructions, sys.stdout, trace_path=args.trace, verbose=args.verbose)
    except (ParseError, RuntimeError) as exc:
        print(exc, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
