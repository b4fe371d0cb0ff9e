#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command-line interface for the purs helper module.
"""
import sys
import json
import argparse
from typing import List, Optional, Tuple

from loguru import logger

from .config import PursHelperSettings, load_settings
from .core_types import ConfigurationError, HostPlatform, ResolutionError
from .invoker import PursCompiler
from .locator import CompilerLocator

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(verbose: int = 0, quiet: bool = False, default: str = "INFO"):
    """Install the stderr sink at the level selected by the flags."""
    logger.remove()  # Remove default handler
    if quiet:
        level = "WARNING"
    elif verbose >= 2:
        level = "DEBUG"
    elif verbose == 1:
        level = "INFO"
    else:
        level = default
    logger.add(sys.stderr, format=LOG_FORMAT, level=level)
    return level


def split_passthrough(argv: List[str]) -> Tuple[List[str], List[str]]:
    """Split arguments at the first ``--``; the rest goes to purs unchanged."""
    if "--" in argv:
        index = argv.index("--")
        return argv[:index], argv[index + 1:]
    return argv, []


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="purs-helper",
        description="Locate and drive the PureScript compiler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the compiler that would be used
  purs-helper version

  # Compile sources, passing --json-errors to purs
  purs-helper compile 'src/**/*.purs' 'test/**/*.purs' -- --json-errors

  # Print the module graph as JSON
  purs-helper graph 'src/**/*.purs'

  # Start a repl
  purs-helper repl 'src/**/*.purs'
""",
    )
    parser.add_argument(
        "--verbose", "-v", action="count", default=0, help="Increase verbosity"
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true", help="Suppress non-error output"
    )
    parser.add_argument(
        "--config", help="Load settings from a JSON file (default: ./purs_helper.json)"
    )
    parser.add_argument("--compiler", help="Compiler command to use instead of purs")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("version", help="Show the located compiler and version")
    for name, help_text in (
        ("compile", "Compile PureScript sources"),
        ("repl", "Start an interactive repl"),
        ("graph", "Print the module dependency graph as JSON"),
    ):
        sub = subparsers.add_parser(
            name, help=help_text, description=f"{help_text}. Arguments after -- are passed to purs."
        )
        sub.add_argument("globs", nargs="*", help="Source file globs")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function for command-line usage.
    """
    own_args, passthrough = split_passthrough(
        list(sys.argv[1:] if argv is None else argv)
    )
    parser = build_parser()
    args = parser.parse_args(own_args)

    configure_logging(args.verbose, args.quiet)

    try:
        settings = load_settings(args.config)
    except ConfigurationError as e:
        logger.error(f"Failed to load configuration file: {e}")
        return 1
    if not args.verbose and not args.quiet:
        configure_logging(default=settings.log_level)

    locator = CompilerLocator(
        HostPlatform.current(), command=args.compiler or settings.compiler_command
    )
    try:
        handle = locator.locate()
    except ResolutionError as e:
        print(str(e), file=sys.stderr)
        return 1

    if args.command == "version":
        print(handle)
        return 0

    return run_subcommand(PursCompiler(handle), args.command, args.globs, passthrough, settings)


def run_subcommand(
    compiler: PursCompiler,
    command: str,
    globs: List[str],
    passthrough: List[str],
    settings: PursHelperSettings,
) -> int:
    """Run compile, repl or graph and report the outcome."""
    all_globs = [*settings.globs, *globs]
    extra_args = [*settings.args_for(command), *passthrough]

    if command == "graph":
        graph_result = compiler.graph(all_globs, extra_args)
        if not graph_result.success:
            for error in graph_result.errors:
                logger.error(error)
            return 1
        print(json.dumps(graph_result.graph.to_dict(), indent=2, sort_keys=True))
        return 0

    if command == "compile":
        result = compiler.compile(all_globs, extra_args)
        if result.stdout:
            print(result.stdout)
    else:
        result = compiler.repl(all_globs, extra_args)

    if result.failed:
        logger.error(result.short_message)
        return 1
    logger.info(f"purs {command} finished in {result.execution_time:.2f}s")
    return 0
