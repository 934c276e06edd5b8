# cli.py
#
# Usage: echo <input_text> | nfa-grep -E <pattern>
#
# Exit codes:
#   0  the line matches the pattern
#   1  no match, bad arguments, bad pattern or search budget exhausted

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, NoReturn, Optional, TextIO

from .compiler import compile_pattern
from .config import AppConfig, load_config
from .dump import dump_engine_table
from .errors import PatternSyntaxError, SearchBudgetExceeded
from .log import configure_logging

logger = logging.getLogger(__name__)

EXIT_MATCH = 0
EXIT_NO_MATCH = 1


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        # argparse defaults to exit status 2; grep callers only expect 0/1
        self.print_usage(sys.stderr)
        self.exit(EXIT_NO_MATCH, f"{self.prog}: error: {message}\n")


def build_arg_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(prog="nfa-grep", description="Match one stdin line against a pattern")
    p.add_argument("-E", dest="pattern", required=True, metavar="PATTERN",
                   help="Pattern to match")
    p.add_argument("--config", metavar="FILE", help="TOML configuration file")
    p.add_argument("--dump", action="store_true",
                   help="Print the compiled state table to stderr")
    p.add_argument("--log-level", metavar="LEVEL",
                   help="Override the configured log level")
    return p


def read_line(stream: TextIO) -> str:
    line = stream.readline()
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        log_settings = config.logging
        if args.log_level:
            overrides = {"level": args.log_level, "format": log_settings.format}
            log_settings = AppConfig.from_mapping({"logging": overrides}).logging
    except (OSError, ValueError) as ex:
        print(f"CONFIG ERROR: {ex}", file=sys.stderr)
        return EXIT_NO_MATCH
    configure_logging(log_settings)

    try:
        engine = compile_pattern(args.pattern, max_steps=config.engine.max_steps)
    except PatternSyntaxError as ex:
        print(f"PATTERN ERROR: {ex}", file=sys.stderr)
        return EXIT_NO_MATCH

    if args.dump:
        print(dump_engine_table(engine), file=sys.stderr)

    line = read_line(stdin if stdin is not None else sys.stdin)

    try:
        matched = engine.decide(line)
    except SearchBudgetExceeded as ex:
        print(f"SEARCH ERROR: {ex}", file=sys.stderr)
        return EXIT_NO_MATCH

    logger.info("pattern %r %s %r", args.pattern, "matched" if matched else "did not match", line)
    return EXIT_MATCH if matched else EXIT_NO_MATCH


if __name__ == "__main__":
    sys.exit(main())
