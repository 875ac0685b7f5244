"""Perch CLI — inspect routes and discovered actions.

Entry point registered as ``perch`` in ``pyproject.toml``::

    [project.scripts]
    perch = "perch.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``perch`` command."""
    parser = argparse.ArgumentParser(
        prog="perch",
        description="Perch — an ASGI framework where actions register their own routes.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log discovery details to stderr",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- perch routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )

    # -- perch actions ----------------------------------------------------
    actions_parser = subparsers.add_parser(
        "actions",
        help="List action classes found on disk (hooks are not called)",
    )
    actions_parser.add_argument(
        "dirs",
        nargs="*",
        help="Directories to scan, in order (default: ./actions)",
    )
    actions_parser.add_argument(
        "--all",
        action="store_true",
        help="Include classes that do not declare a routes hook",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        import logging

        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "routes":
        from perch.cli._routes import run_routes

        run_routes(args)
    elif args.command == "actions":
        from perch.cli._actions import run_actions

        run_actions(args)
