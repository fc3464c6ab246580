#!/usr/bin/env python3
"""
Command line interface for cliprobe.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import (
    AGENT_VERSION, DEFAULT_MAX_DEPTH, DEFAULT_MAX_WORKERS, HELP_TIMEOUT,
    LOG_LEVEL_ENV, LOG_FORMAT, LOG_DATE_FORMAT,
)
from .analyzer import CLIAnalyzer
from .classifier import OptionClassifier
from .constraints import ConstraintResolver
from .exceptions import BinaryValidationError
from .models import OptionType
from .progress import ProgressIndicator, timed
from .rules import load_rule_table
from .validation import validate_binary

logger = logging.getLogger("cliprobe")


def configure_logging(debug: bool = False) -> None:
    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, os.environ.get(LOG_LEVEL_ENV, "INFO").upper(), logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT, stream=sys.stderr)


def _emit(payload, output: Optional[Path] = None) -> None:
    serialized = json.dumps(payload, indent=2, ensure_ascii=False)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(serialized + "\n", encoding="utf-8")
        logger.info("Output: %s", output)
    else:
        print(serialized)


@timed
def cmd_analyze(args) -> int:
    try:
        binary = validate_binary(args.binary)
    except BinaryValidationError as e:
        logger.error("Binary validation failed: %s", e)
        return 1

    analyzer = CLIAnalyzer(
        rule_table=load_rule_table(args.rules_dir),
        max_depth=args.max_depth,
        help_timeout=args.timeout,
        max_workers=args.workers,
        detect_version=not args.no_version,
    )

    progress = ProgressIndicator(enabled=not args.no_progress)
    progress.start_spinner(f"Analyzing {binary}")
    try:
        analysis = analyzer.analyze(binary, progress)
    finally:
        progress.complete()

    _emit(analysis.to_dict(), args.output)
    return 0


def cmd_classify(args) -> int:
    classifier = OptionClassifier(load_rule_table(args.rules_dir))
    _emit([classifier.describe(option, args.help_text).to_dict() for option in args.options])
    return 0


def cmd_constraints(args) -> int:
    resolver = ConstraintResolver(load_rule_table(args.rules_dir))
    if args.type == OptionType.NUMERIC.value:
        constraint = resolver.resolve_numeric(args.option)
    else:
        constraint = resolver.resolve_enum(args.option, args.help_text)
    _emit(constraint.to_dict())
    return 0


def cmd_validate(args) -> int:
    try:
        print(validate_binary(args.binary))
    except BinaryValidationError as e:
        logger.error("Binary validation failed: %s", e)
        return 1
    return 0


def cmd_options(args) -> int:
    """Group the root options of a saved analysis by inferred type"""
    try:
        analysis = json.loads(args.analysis.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Could not read analysis JSON %s: %s", args.analysis, e)
        return 1

    options = []
    if isinstance(analysis, dict):
        raw = analysis.get("options")
        if isinstance(raw, list):
            options = [token for token in raw if isinstance(token, str)]
    if not options:
        logger.warning("No options found in analysis JSON")

    classifier = OptionClassifier(load_rule_table(args.rules_dir))
    _emit(classifier.group_by_type(options))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cliprobe",
        description="Discover the subcommands and options of a CLI binary from its help output.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {AGENT_VERSION}")
    parser.add_argument("--debug", action="store_true", help="show debug logging")
    parser.add_argument("--rules-dir", type=Path, help="directory holding the YAML rule tables")

    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="analyze a CLI binary")
    analyze.add_argument("binary", help="binary path or name on PATH")
    analyze.add_argument("-o", "--output", type=Path, help="output JSON file (default: stdout)")
    analyze.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH, help="maximum subcommand depth")
    analyze.add_argument("--timeout", type=float, default=HELP_TIMEOUT, help="seconds allowed per --help call")
    analyze.add_argument("--workers", type=int, default=DEFAULT_MAX_WORKERS,
                         help="maximum concurrent --help calls across the tree (1 = sequential)")
    analyze.add_argument("--no-version", action="store_true", help="skip version detection")
    analyze.add_argument("--no-progress", action="store_true", help="disable progress indicators")
    analyze.set_defaults(func=cmd_analyze)

    classify = sub.add_parser("classify", help="infer option types")
    classify.add_argument("options", nargs="+", help="option tokens such as --port")
    classify.add_argument("--help-text", help="help text used to extract enum values")
    classify.set_defaults(func=cmd_classify)

    constraints = sub.add_parser("constraints", help="resolve numeric or enum constraints")
    constraints.add_argument("option", help="option token such as --format")
    constraints.add_argument("--type", choices=[OptionType.NUMERIC.value, OptionType.ENUM.value],
                             default=OptionType.NUMERIC.value)
    constraints.add_argument("--help-text", help="help text used to extract enum values")
    constraints.set_defaults(func=cmd_constraints)

    validate = sub.add_parser("validate", help="validate and resolve a binary path")
    validate.add_argument("binary")
    validate.set_defaults(func=cmd_validate)

    options = sub.add_parser("options", help="group the options of a saved analysis by type")
    options.add_argument("analysis", type=Path, help="analysis JSON written by 'analyze'")
    options.set_defaults(func=cmd_options)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.debug)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
