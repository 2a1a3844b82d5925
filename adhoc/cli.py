"""CLI entrypoints for adhoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .expander import Expander
from .logging import configure_logging
from .models import ExpansionResult
from .stores import WorkspaceStore
from .workspace import ProjectWorkspace


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="adhoc",
        description="Expand project descriptors embedded in C# files into git-tracked projects.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    expand_parser = subparsers.add_parser(
        "expand",
        help="Expand the descriptor comment of each file into its own project.",
    )
    _add_verbose_option(expand_parser, suppress_default=True)
    expand_parser.add_argument(
        "paths",
        nargs="+",
        help="Source files, or directories to scan for source files.",
    )
    expand_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Directory that receives generated projects (defaults to each file's directory).",
    )
    expand_parser.add_argument(
        "--config",
        default=".",
        help="Path to .adhoc.yml or the directory containing it.",
    )
    expand_parser.add_argument(
        "--workspace",
        default=None,
        help="JSON file that records registered projects between runs.",
    )
    expand_parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for adhoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if getattr(args, "log_file", None) else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    if args.command == "expand":
        try:
            config = load_config(Path(args.config))
        except ConfigError as exc:
            parser.exit(1, f"{exc}\n")

        missing = [raw for raw in args.paths if not Path(raw).exists()]
        if missing:
            parser.exit(1, f"Path not found: {', '.join(missing)}\n")

        workspace_file = Path(args.workspace) if args.workspace else config.workspace_file
        workspace = ProjectWorkspace(WorkspaceStore(workspace_file))
        expander = Expander(config=config, workspace=workspace)
        output = Path(args.output) if args.output else None

        results = expander.process_paths(args.paths, output)
        for path, result in results.items():
            print(_describe(path, result))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _describe(path: Path, result: ExpansionResult) -> str:
    name = _relativize(path)
    if not result.handled:
        return f"Nothing to do in {name}"
    if result.commit is None:
        return f"Expanded {name} (no project)"
    return f"Expanded {name} (commit {result.commit.short_sha})"


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
