"""Switchyard CLI — inspect an app's router trees.

Entry point registered as ``switchyard`` in ``pyproject.toml``::

    [project.scripts]
    switchyard = "switchyard.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``switchyard`` command."""
    parser = argparse.ArgumentParser(
        prog="switchyard",
        description="Switchyard — composable router trees for ASGI.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- switchyard routes ------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="Print the endpoint map of an app")
    routes_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )
    routes_parser.add_argument(
        "--tree",
        choices=("root", "api"),
        default="root",
        help="Router tree to map (default: root)",
    )
    routes_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the map as JSON, exactly as GET /api serves it",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from switchyard.cli._routes import run_routes

        run_routes(args)
