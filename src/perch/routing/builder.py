"""Route table builder — flattens nested route declarations.

A route declaration is a tree. Leaves are handlers, branches map route
keys (``[METHOD@]path``) to further nodes::

    {
        "/": index,
        "/users": {
            "GET@/": list_users,
            "POST@/": create_user,
            "/:id": show_user,
        },
    }

``build_routes`` walks the tree depth-first and produces one
``CompiledRoute`` per distinct resolved path, in first-discovery order.

Duplicate paths:
    A handler key that resolves to a path already in the table joins
    that route: it adds its method token, or overwrites the handler for
    a token already present. The route keeps its original position.

    A *subtree* that resolves to a path already in the table is dropped
    for that path, methods and all. With
    ``{"GET@/a/b": g, "/a": {"POST@/b": p}}`` the table has one route
    for ``/a/b`` with only ``GET``; ``POST /a/b`` answers 405. Declare each
    resolved path in exactly one place.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from perch._internal.types import Handler
from perch.errors import ConfigurationError
from perch.routing.pattern import PathPattern
from perch.routing.route import CompiledRoute, split_route_key

logger = logging.getLogger("perch.routing")


@dataclass(frozen=True, slots=True)
class Leaf:
    """A handler at the end of a route key."""

    handler: Handler


@dataclass(frozen=True, slots=True)
class Branch:
    """A nested set of route keys, in declaration order."""

    entries: tuple[tuple[str, RouteNode], ...] = ()


RouteNode: TypeAlias = Leaf | Branch


def route_tree(routes: Mapping[str, Any] | Branch) -> Branch:
    """Convert a plain nested mapping into a ``Branch`` tree.

    Callables become ``Leaf`` nodes, mappings become ``Branch`` nodes,
    and existing ``Leaf``/``Branch`` values are kept as they are.
    Raises ``ConfigurationError`` for anything else.
    """
    if isinstance(routes, Branch):
        return routes

    entries: list[tuple[str, RouteNode]] = []
    for key, value in routes.items():
        if not isinstance(key, str):
            msg = f"Route keys must be strings, got {key!r}"
            raise ConfigurationError(msg)
        entries.append((key, _to_node(key, value)))
    return Branch(tuple(entries))


def _to_node(key: str, value: Any) -> RouteNode:
    if isinstance(value, Leaf | Branch):
        return value
    if isinstance(value, Mapping):
        return route_tree(value)
    if callable(value):
        return Leaf(value)
    msg = f"Route {key!r} must map to a handler or a nested mapping, got {type(value).__name__}"
    raise ConfigurationError(msg)


def join_paths(base: str, path: str) -> str:
    """Join two route paths with exactly one slash between them.

    An optional group opening with a slash (``{/}?``, ``{/:id}?``) keeps
    its own slash, so it stays optional after joining::

        join_paths("/", "users")      -> "/users"
        join_paths("/api/", "/users") -> "/api/users"
        join_paths("/api", "{/}?")    -> "/api{/}?"
        join_paths("/api", "")        -> "/api/"
    """
    if base.endswith("/"):
        base = base[:-1]
    if not path.startswith("/") and not path.startswith("{/"):
        path = "/" + path
    return base + path


@dataclass(slots=True)
class _Slot:
    """A route being assembled. Mutable during building only."""

    pattern: PathPattern
    methods: dict[str, Handler] = field(default_factory=dict)


def build_routes(
    routes: Mapping[str, Any] | Branch,
    base_path: str = "/",
) -> tuple[CompiledRoute, ...]:
    """Flatten a route declaration into an ordered, immutable route table."""
    slots = _flatten(route_tree(routes), base_path)
    table = tuple(CompiledRoute(slot.pattern, slot.methods) for slot in slots.values())
    for route in table:
        logger.debug("route %s [%s]", route.path, ", ".join(route.methods))
    return table


def _flatten(branch: Branch, base_path: str) -> dict[str, _Slot]:
    """Depth-first flattening into ``resolved path -> slot`` (insertion ordered)."""
    slots: dict[str, _Slot] = {}
    for key, node in branch.entries:
        method, path = split_route_key(key)
        full_path = join_paths(base_path, path)

        match node:
            case Leaf(handler=handler):
                slot = slots.get(full_path)
                if slot is None:
                    slot = slots[full_path] = _Slot(PathPattern(full_path))
                slot.methods[method] = handler
            case Branch():
                for sub_path, sub_slot in _flatten(node, full_path).items():
                    # First discovery wins; later duplicates are dropped, not merged
                    slots.setdefault(sub_path, sub_slot)

    return slots

