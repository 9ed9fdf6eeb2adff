# main.py
from __future__ import annotations

import argparse
import sys
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import IO, Iterable, List

from debug import COMPONENTS, Debug, debug
from errors import EnigmaError, ValidationError
from machine import Machine
from suites import DEFAULT_SUITE, SUITES, suite_config
from utilities import (
    apply_settings,
    build_machine,
    format_groups,
    load_config,
    parse_settings_line,
    sorted_names,
)

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class Config:
    """Runtime switches that influence the message loop."""

    block: int = 5                  # display block size
    verbose: bool = False           # per-character trace on stderr
    debug_components: List[str] = field(default_factory=list)
    log_to: str | None = None


# ────────────────────────────────────────────────────────────────────────
#  1. Message loop
# ────────────────────────────────────────────────────────────────────────


def process(
    machine: Machine,
    lines: Iterable[str],
    out: IO[str],
    cfg: Config,
    err: IO[str] | None = None,
) -> None:
    """Lines whose first non-blank character is '*' re-key the machine, so
    a message cannot start with '*'. Every other line is converted and
    written in blocks. Blank lines are echoed as blank."""
    err = err or sys.stderr
    trace = (lambda line: print(line, file=err)) if cfg.verbose else None

    for raw in lines:
        line = raw.rstrip("\r\n")
        if line.lstrip().startswith("*"):
            apply_settings(machine, parse_settings_line(line, machine.num_rotors))
            continue
        if not line.strip():
            print(file=out)
            continue
        if not machine.rotors:
            raise ValidationError("Message given before any settings line")
        print(format_groups(machine.convert_message(line, trace), cfg.block), file=out)


# ────────────────────────────────────────────────────────────────────────
#  2. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt with a rotor machine")
    p.add_argument("input", nargs="?", metavar="FILE", help="Message file (default: stdin). Lines starting with '*' are settings lines, so '*' cannot begin a message.")
    p.add_argument("-o", "--output", metavar="FILE", help="Write results here instead of stdout.")
    p.add_argument("--config", metavar="FILE", help="Load alphabet, wheels and slots from JSON.")
    p.add_argument("--suite", type=str.upper, choices=sorted(SUITES), default=DEFAULT_SUITE, help=f"Built-in machine when no --config is given. Default: {DEFAULT_SUITE}")
    p.add_argument("-s", "--settings", metavar="LINE", help="Settings line, e.g. '* B-Thin Beta III IV I AXLE (YF) (ZH)'.")
    p.add_argument("-m", "--message", metavar="TEXT", help="Convert TEXT instead of reading a file.")
    p.add_argument("--block", type=int, default=5, help="Output group size. Default: 5")
    p.add_argument("--list", action="store_true", help="List the wheels of the machine and exit.")
    p.add_argument("-v", "--verbose", action="store_true", help="Trace every character on stderr.")
    p.add_argument("--debug", action="append", choices=COMPONENTS, metavar="COMPONENT", help=f"Enable debug logging for a component ({', '.join(COMPONENTS)}).")
    p.add_argument("--log-file", metavar="FILE", help="Also write debug logging to FILE.")
    return p.parse_args(argv)


# ────────────────────────────────────────────────────────────────────────
#  3. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    cfg = Config(
        block=args.block,
        verbose=args.verbose,
        debug_components=args.debug or [],
        log_to=args.log_file,
    )

    debug.toggle_global(bool(cfg.debug_components))
    if cfg.debug_components:
        Debug.configure(log_to=cfg.log_to)
        debug.enable(*cfg.debug_components)

    try:
        machine_cfg = load_config(args.config) if args.config else suite_config(args.suite)
        machine = build_machine(machine_cfg)

        if args.list:
            for name in sorted_names(machine.available):
                rotor = machine.available[name]
                notches = f" notches={rotor.notches()}" if rotor.notches() else ""
                print(f"{rotor.name:<8} {type(rotor).__name__:<12}{notches}")
            return 0

        if args.settings:
            apply_settings(machine, parse_settings_line(args.settings, machine.num_rotors))

        with ExitStack() as stack:
            out = sys.stdout
            if args.output:
                out = stack.enter_context(open(args.output, "w", encoding="utf-8"))
            if args.message is not None:
                lines: Iterable[str] = [args.message]
            elif args.input:
                lines = stack.enter_context(open(args.input, encoding="utf-8"))
            else:
                lines = sys.stdin
            process(machine, lines, out, cfg)
    except (EnigmaError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
