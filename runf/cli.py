"""CLI entrypoint for runf."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from .errors import RunfError
from .logging import configure_logging, get_logger
from .orchestrator import Orchestrator

_LOGGER = get_logger("cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="runf",
        description="Run a directory of loose C# files as a throwaway dotnet project.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a debug log of the run (workspace path, references) to this file.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Directory containing the source files (defaults to current directory).",
    )
    return parser


def main(argv: list[str] | None = None, *, orchestrator: Orchestrator | None = None) -> int:
    """CLI entrypoint; returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    except OSError as exc:
        print(f"Cannot open log file {args.log_file}: {exc}")
        return 1

    source_directory = args.path if args.path is not None else os.getcwd()
    orchestrator = orchestrator or Orchestrator()
    try:
        return orchestrator.run(source_directory)
    except RunfError as exc:
        _LOGGER.debug("runf failed", exc_info=True)
        print(exc)
        return 1
    except Exception as exc:  # pragma: no cover
        _LOGGER.debug("Unexpected failure", exc_info=True)
        print(exc)
        return 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
