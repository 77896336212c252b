"""CLI entrypoints for kdoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import CONFIG_FILENAME, ConfigError, load_config
from .logging import configure_logging
from .orchestrator import Generator, NoInputFilesError


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    # subcommands must not reset flags given before the command name
    default: object = argparse.SUPPRESS if suppress_default else False
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Log per-file progress for troubleshooting.",
    )
    group.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default,
        help="Only log warnings and errors.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kdoc",
        description="Generate markdown docs directly from doc comments in source code.",
    )
    _add_logging_options(parser)
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write a debug-level log to this file.",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Where to write the generated docs (defaults to output_path from kdoc.yml).",
    )
    parser.add_argument(
        "-r",
        "--root",
        default=None,
        help="Directory holding kdoc.yml (defaults to the current directory).",
    )
    parser.add_argument(
        "-s",
        "--recurse-scan",
        action="store_true",
        help="Also scan the output directory for files to document.",
    )
    parser.add_argument(
        "-g",
        "--no-git",
        action="store_true",
        help="Disable git metadata collection and embedding.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init",
        help="Create the default kdoc.yml if it does not exist yet.",
    )
    _add_logging_options(init_parser, suppress_default=True)

    generate_parser = subparsers.add_parser(
        "generate",
        aliases=["gen"],
        help="Generate markdown docs from the source files matched by kdoc.yml.",
    )
    _add_logging_options(generate_parser, suppress_default=True)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for kdoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    root = Path(args.root).expanduser().resolve() if args.root else Path.cwd()
    config_path = root / CONFIG_FILENAME
    try:
        config = load_config(config_path)
    except (ConfigError, OSError) as exc:
        parser.exit(1, f"Failed to load {config_path}: {exc}\n")

    if args.command == "init":
        print(
            f"kdoc initialized successfully in {config_path}\n\n"
            "edit this file to configure kdoc\nor run 'kdoc generate' to build docs"
        )
    elif args.command in {"generate", "gen"}:
        output_dir = Path(args.output) if args.output else None
        try:
            result = Generator().generate(
                root,
                config,
                output_dir=output_dir,
                use_git=not args.no_git,
                recurse_scan=bool(args.recurse_scan),
            )
        except (NoInputFilesError, FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        print(f"Wrote {len(result.written)} doc(s) to {_relativize(result.output_dir)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
