"""``perch routes`` — list registered routes.

Resolves an import string to a perch App and prints its route table in
registration order, duplicates included.
"""

import argparse
import sys

from perch.cli._resolve import resolve_app


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of METHOD, PATH and HANDLER for ``args.app``."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = app.routes
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str]] = []
    for route in routes:
        methods_str = ", ".join(sorted(route.methods))
        handler_name = route.handler_name
        if route.name:
            handler_name = f"{handler_name} ({route.name})"
        rows.append((methods_str, route.path, handler_name))

    print_table(("METHOD", "PATH", "HANDLER"), rows)


def print_table(header: tuple[str, str, str], rows: list[tuple[str, str, str]]) -> None:
    first = max(len(header[0]), *(len(r[0]) for r in rows))
    second = max(len(header[1]), *(len(r[1]) for r in rows))
    fmt = f"{{:<{first}}}  {{:<{second}}}  {{}}"
    print(fmt.format(*header))
    sep_len = first + second + 4 + max((len(r[2]) for r in rows), default=0)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row))
