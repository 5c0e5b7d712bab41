"""makecomp command line interface."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from .completions.handlers import handle_compgen
from .completions.session import CompletionSession
from .config import Configuration
from .config_loader import ConfigLoader
from .constants import SUPPORTED_SHELLS
from .index.cache import read_lines, serialize
from .index.parsing import parse
from .index.targets import collect_targets
from .logging_setup import get_logger, init_logger
from .models import ExitCode, MakecompError

__all__ = ["get_parser", "main"]


def get_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(prog="makecomp", description="Annotation-driven completion for make", allow_abbrev=False)
    parser.add_argument("--debug", help="Enable debug mode and log to a file", metavar="filename")
    parser.add_argument("--config", help="Use a different configuration file", metavar="filename", default="")

    subparsers = parser.add_subparsers(dest="command", required=True)

    complete = subparsers.add_parser("complete", help="Print the candidates for the word under the cursor")
    complete.add_argument("--file", help="Makefile to read (default: looked up in the current directory)", type=Path)
    complete.add_argument("--line", help="Command line up to the cursor")
    complete.add_argument("--cword", help="Index of the word under the cursor", type=int)
    complete.add_argument("words", nargs="*", help="Command line words (after --)")

    compgen = subparsers.add_parser("compgen", help="Print or install the shell integration script")
    compgen.add_argument("shell", choices=SUPPORTED_SHELLS)
    compgen.add_argument("path", nargs="?", help="'default' or an absolute path to install to")

    dump = subparsers.add_parser("dump", help="Print the parsed annotations")
    dump.add_argument("--file", type=Path)
    dump.add_argument("--json", action="store_true", help="JSON output, including TYPE, REQUIRED and DEFAULT")

    targets = subparsers.add_parser("targets", help="Print the Makefile's rule names")
    targets.add_argument("--file", type=Path)

    subparsers.add_parser("clear-cache", help="Remove every cached index")

    return parser


def _load_config(filename: str, strict: bool) -> Configuration:
    """Load the configuration, falling back to defaults unless `strict`."""
    log = get_logger("config")
    try:
        return ConfigLoader(log).load(filename)
    except MakecompError:
        if strict:
            raise
        return Configuration(logger=log)


def run_complete(args: argparse.Namespace, config: Configuration) -> ExitCode:
    """Print one candidate per line; never fails."""
    session = CompletionSession(config, get_logger("complete"))
    if args.line is not None:
        candidates = session.complete_line(args.line, args.file)
    else:
        cword = args.cword if args.cword is not None else max(len(args.words) - 1, 0)
        candidates = session.complete(args.words, cword, args.file)
    for candidate in candidates:
        print(candidate)
    return ExitCode.SUCCESS


def _require_source(session: CompletionSession, filename: Path | None) -> Path:
    log = session.log
    source = filename or session.find_source()
    if source is None or not source.is_file():
        log.error("No Makefile found%s", f" at {filename}" if filename else " in the current directory")
        raise MakecompError
    return source


def run_dump(args: argparse.Namespace, config: Configuration) -> ExitCode:
    """Print the annotations of the Makefile, bypassing the cache."""
    session = CompletionSession(config, get_logger("dump"))
    source = _require_source(session, args.file)
    index = parse(read_lines(source), config.get_str("marker"), session.log)
    if args.json:
        print(json.dumps([asdict(d) for d in index.definitions()], indent=2))
    else:
        print(serialize(index), end="")
    return ExitCode.SUCCESS


def run_targets(args: argparse.Namespace, config: Configuration) -> ExitCode:
    """Print the rule names of the Makefile."""
    session = CompletionSession(config, get_logger("targets"))
    source = _require_source(session, args.file)
    for target in collect_targets(read_lines(source)):
        print(target)
    return ExitCode.SUCCESS


def run_clear_cache(_args: argparse.Namespace, config: Configuration) -> ExitCode:
    """Remove the cache files, they are rebuilt on the next completion."""
    session = CompletionSession(config, get_logger("cache"))
    removed = session.cache.clear()
    print(f"Removed {removed} cache file{'' if removed == 1 else 's'} from {session.cache.cache_dir}")
    return ExitCode.SUCCESS


def run_compgen(args: argparse.Namespace, config: Configuration) -> ExitCode:
    """Print or install the shell script."""
    compgen_args = [args.shell] + ([args.path] if args.path else [])
    success, result = handle_compgen(compgen_args, config, get_logger("compgen"))
    if not success:
        print(result, file=sys.stderr)
        return ExitCode.COMMAND_ERROR
    print(result)
    return ExitCode.SUCCESS


_HANDLERS = {
    "complete": run_complete,
    "compgen": run_compgen,
    "dump": run_dump,
    "targets": run_targets,
    "clear-cache": run_clear_cache,
}


def main(argv: list[str] | None = None) -> None:
    """Run the command."""
    args = get_parser().parse_args(argv)
    if args.debug:
        init_logger(filename=args.debug, force_debug=True)
    else:
        init_logger()
    log = get_logger()

    # a completion must never break the user's shell: no error escapes `complete`
    interactive = args.command != "complete"
    try:
        config = _load_config(args.config, strict=interactive)
        code = _HANDLERS[args.command](args, config)
    except MakecompError:
        code = ExitCode.ENV_ERROR if args.command in {"dump", "targets"} else ExitCode.USAGE_ERROR
    except OSError:
        log.exception("%s failed", args.command)
        code = ExitCode.COMMAND_ERROR if interactive else ExitCode.SUCCESS
    except KeyboardInterrupt:
        code = ExitCode.COMMAND_ERROR if interactive else ExitCode.SUCCESS
    except Exception:  # pylint: disable=W0718
        log.critical("Unhandled exception:", exc_info=True)
        code = ExitCode.COMMAND_ERROR if interactive else ExitCode.SUCCESS
    sys.exit(code)
