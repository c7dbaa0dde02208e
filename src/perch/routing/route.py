"""Route keys, method tokens and the CompiledRoute frozen dataclass."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from perch._internal.types import Handler
from perch.routing.pattern import RoutePattern, compile_pattern

KNOWN_METHODS: tuple[str, ...] = ("GET", "HEAD", "POST", "PUT", "DELETE", "OPTIONS", "PATCH")
"""HTTP methods recognised as a ``METHOD@`` route key prefix."""

ANY = "any"
"""Method token for handlers registered without a method prefix."""

_METHOD_PREFIX = re.compile(rf"^({'|'.join(KNOWN_METHODS)})@")


def split_route_key(key: str) -> tuple[str, str]:
    """Split a ``[METHOD@]PATH`` route key into ``(method, path)``.

    Examples::

        "GET@/users"  -> ("GET", "/users")
        "/users"      -> ("any", "/users")
        "get@/users"  -> ("any", "get@/users")   # not a known method
        "FETCH@/x"    -> ("any", "FETCH@/x")
    """
    match = _METHOD_PREFIX.match(key)
    if match is None:
        return ANY, key
    return match.group(1), key[match.end() :]


@dataclass(frozen=True, slots=True)
class CompiledRoute:
    """A compiled pattern and the handlers registered for it, by method token.

    Built by ``build_routes``, or constructed directly by callers that
    want full control over matching::

        CompiledRoute(re.compile(r"/files/(?P<name>.+)$"), {"GET": serve_file})

    *pattern* may be a template string, a compiled ``re.Pattern`` or any
    object implementing ``RoutePattern``. *methods* is copied and frozen.
    """

    pattern: RoutePattern
    methods: Mapping[str, Handler]

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", compile_pattern(self.pattern))
        object.__setattr__(self, "methods", MappingProxyType(dict(self.methods)))

    @property
    def path(self) -> str:
        """The source the pattern was compiled from."""
        return self.pattern.source

    @property
    def known_methods(self) -> list[str]:
        """Method tokens with a handler, in registration order."""
        return list(self.methods)
