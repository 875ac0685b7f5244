"""``perch actions`` — list action classes under one or more directories.

Imports the source files the same way ``App.register_actions()`` does,
but never calls a ``routes`` hook, so nothing gets registered.
"""

import argparse
import sys

from perch.actions.discovery import iter_actions
from perch.cli._routes import print_table


def run_actions(args: argparse.Namespace) -> None:
    """Print discovered classes in the order their hooks would run."""
    found = [
        action
        for action in iter_actions(args.dirs or None)
        if action.has_routes or args.all
    ]
    if not found:
        print("No actions found.", file=sys.stderr)
        raise SystemExit(1)

    rows = [
        (
            "yes" if action.has_routes else "no",
            action.reference.qualname,
            str(action.reference.source),
        )
        for action in found
    ]
    print_table(("ROUTES", "ACTION", "SOURCE"), rows)
