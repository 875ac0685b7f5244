"""Routing — compiled route table with O(path-depth) matching.

Routes are registered during setup, kept in registration order for
introspection, and compiled into an immutable lookup structure when
the app freezes.
"""

from perch.routing.route import Route, RouteMatch
from perch.routing.router import Router, parse_path

__all__ = ["Route", "RouteMatch", "Router", "parse_path"]
