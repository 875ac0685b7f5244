"""Actions — single-purpose classes that register their own routes."""

from perch.actions.action import Action, build_action
from perch.actions.controller import ActionTarget, action_endpoint, parse_target
from perch.actions.discovery import iter_actions, register_routes
from perch.actions.router import ActionRouter
from perch.actions.types import ROUTES_HOOK, ActionReference, DiscoveredAction, RouteProvider

__all__ = [
    "ROUTES_HOOK",
    "Action",
    "ActionReference",
    "ActionRouter",
    "ActionTarget",
    "DiscoveredAction",
    "RouteProvider",
    "action_endpoint",
    "build_action",
    "iter_actions",
    "parse_target",
    "register_routes",
]
