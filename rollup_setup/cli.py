"""Command-line entry point for ``roll-up``.

Usage::

    roll-up --pkg pnpm
    roll-up --pkg yarn --force --name "Jane"
    roll-up --no-install
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import NoReturn, Sequence

from .config import PackageManager, SetupConfig
from .errors import EXIT_OK, EXIT_USAGE, SetupError
from .installer import InstallError
from .pipeline import SetupPipeline
from .utils import print_command, print_error

_MANAGER_CHOICES = ", ".join(m.value for m in PackageManager)

_OWN_FLAGS = frozenset({"--pkg", "-p", "--no-install", "--force", "--name", "-h", "--help"})


class _UsageParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with the full help and exit 1."""

    def error(self, message: str) -> NoReturn:
        print_error(message)
        self.print_help()
        sys.exit(EXIT_USAGE)


def build_parser() -> argparse.ArgumentParser:
    parser = _UsageParser(
        prog="roll-up",
        description="Prepare a JavaScript project for Rollup builds with JSDoc-emitted types.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
        epilog=(
            "Examples:\n"
            "  roll-up --pkg pnpm\n"
            '  roll-up --pkg yarn --force --name "Jane"\n'
            "  roll-up --no-install\n"
        ),
    )
    parser.add_argument(
        "--pkg", "-p",
        dest="package_manager",
        metavar="<manager>",
        default=None,
        help=f"Package manager used to install devDependencies. One of: {_MANAGER_CHOICES}",
    )
    parser.add_argument(
        "--no-install",
        dest="skip_install",
        action="store_true",
        help="Do not install devDependencies",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite existing generated files",
    )
    parser.add_argument(
        "--name",
        dest="author_name",
        nargs="?",
        default=None,
        metavar='"Your Name"',
        help="Author name used in LICENSE (falls back to package.json author or git config)",
    )
    return parser


def parse_args(
    argv: Sequence[str] | None = None, project_dir: Path | None = None
) -> SetupConfig:
    """Turn the argument list into a frozen ``SetupConfig``.

    Prints the usage and exits 0 when *argv* is empty or help is requested.
    Exits 1 on an unsupported package manager.  Unrecognised arguments are
    ignored.
    """
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    if not argv:
        parser.print_help()
        sys.exit(EXIT_OK)

    author_name, argv = _take_name(argv)
    args, _unknown = parser.parse_known_args(argv)
    if author_name is None:
        author_name = args.author_name

    manager: PackageManager | None = None
    if args.package_manager is not None:
        try:
            manager = PackageManager.parse(args.package_manager)
        except ValueError:
            parser.error(f"Unsupported package manager: {args.package_manager}")

    try:
        return SetupConfig.from_env(
            package_manager=manager,
            skip_install=args.skip_install,
            force=args.force,
            author_name=author_name,
            project_dir=project_dir,
        )
    except ValueError as exc:
        parser.error(str(exc))


def _take_name(argv: Sequence[str]) -> tuple[str | None, list[str]]:
    """Pull ``--name <value>`` pairs out of *argv*.

    The token after ``--name`` is its value even when it starts with a dash,
    unless it is one of the tool's own flags.  The last pair wins.  A
    ``--name`` with no usable value is left in place for argparse.
    """
    name: str | None = None
    rest: list[str] = []
    i = 0
    while i < len(argv):
        token = argv[i]
        if token == "--name" and i + 1 < len(argv) and argv[i + 1] not in _OWN_FLAGS:
            name = argv[i + 1]
            i += 2
            continue
        rest.append(token)
        i += 1
    return name, rest


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for ``roll-up`` / ``python -m rollup_setup.cli``."""
    config = parse_args(argv)
    pipeline = SetupPipeline(config)
    try:
        asyncio.run(pipeline.run())
    except InstallError as exc:
        print_error(str(exc))
        print_command("You may retry manually: ", exc.command)
        sys.exit(exc.exit_code)
    except SetupError as exc:
        print_error(str(exc))
        sys.exit(exc.exit_code)


if __name__ == "__main__":
    main()
