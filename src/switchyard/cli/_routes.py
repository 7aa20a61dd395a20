"""``switchyard routes`` — print the endpoint map of an app.

Resolves an import string to an App, freezes it (so the api map route is
mounted), and prints the map of the chosen router tree as a table or JSON.
"""

import argparse
import json
import sys

from switchyard.cli._resolve import resolve_app
from switchyard.errors import SwitchyardError
from switchyard.routing.endpoints import build_endpoint_map


def run_routes(args: argparse.Namespace) -> None:
    """Print the endpoint map for ``args.tree`` of ``args.app``."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    try:
        app._ensure_frozen()
        endpoint_map = build_endpoint_map(app.api if args.tree == "api" else app.root)
    except SwitchyardError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if args.json:
        print(json.dumps(endpoint_map, indent=2))
        return

    if not endpoint_map:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str]] = [
        (key, ", ".join(endpoint["accepted_methods"]), endpoint["url"])
        for key, endpoints in endpoint_map.items()
        for endpoint in endpoints
    ]

    max_key = max(max(len(r[0]) for r in rows), 3)  # "KEY" header
    max_methods = max(max(len(r[1]) for r in rows), 7)  # "METHODS" header

    fmt = f"{{:<{max_key}}}  {{:<{max_methods}}}  {{}}"
    print(fmt.format("KEY", "METHODS", "URL"))
    sep_len = max_key + max_methods + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for key, methods, url in rows:
        print(fmt.format(key, methods, url))
