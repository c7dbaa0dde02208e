"""Tests for perch.routing.route — route keys and CompiledRoute."""

import re
from types import MappingProxyType

import pytest

from perch.routing.pattern import PathPattern, RegexPattern
from perch.routing.route import ANY, KNOWN_METHODS, CompiledRoute, split_route_key


def _handler(request, ctx, params):
    return "ok"


class TestSplitRouteKey:
    @pytest.mark.parametrize("method", KNOWN_METHODS)
    def test_known_method_prefix(self, method: str) -> None:
        assert split_route_key(f"{method}@/test") == (method, "/test")

    def test_no_prefix_is_any(self) -> None:
        assert split_route_key("/test") == (ANY, "/test")

    def test_unknown_prefix_is_literal(self) -> None:
        assert split_route_key("FETCH@/test") == (ANY, "FETCH@/test")

    def test_lowercase_method_is_literal(self) -> None:
        assert split_route_key("get@/test") == (ANY, "get@/test")

    def test_only_leading_prefix_splits(self) -> None:
        assert split_route_key("/users/GET@/x") == (ANY, "/users/GET@/x")

    def test_at_sign_later_in_path_kept(self) -> None:
        assert split_route_key("POST@/mail/@me") == ("POST", "/mail/@me")

    def test_prefix_without_path(self) -> None:
        assert split_route_key("GET@") == ("GET", "")

    def test_empty_key(self) -> None:
        assert split_route_key("") == (ANY, "")

    def test_known_methods(self) -> None:
        assert KNOWN_METHODS == ("GET", "HEAD", "POST", "PUT", "DELETE", "OPTIONS", "PATCH")


class TestCompiledRoute:
    def test_template_string_becomes_path_pattern(self) -> None:
        route = CompiledRoute("/users/:id", {"GET": _handler})
        assert isinstance(route.pattern, PathPattern)
        assert route.path == "/users/:id"

    def test_regex_becomes_regex_pattern(self) -> None:
        route = CompiledRoute(re.compile(r"/files/(?P<name>.+)$"), {"GET": _handler})
        assert isinstance(route.pattern, RegexPattern)

    def test_methods_are_frozen_copy(self) -> None:
        methods = {"GET": _handler}
        route = CompiledRoute("/x", methods)
        methods["POST"] = _handler

        assert isinstance(route.methods, MappingProxyType)
        assert list(route.methods) == ["GET"]
        with pytest.raises(TypeError):
            route.methods["PUT"] = _handler  # type: ignore[index]

    def test_known_methods_in_registration_order(self) -> None:
        route = CompiledRoute("/x", {"PATCH": _handler, "GET": _handler})
        assert route.known_methods == ["PATCH", "GET"]

    def test_frozen(self) -> None:
        route = CompiledRoute("/x", {})
        with pytest.raises(AttributeError):
            route.pattern = PathPattern("/y")  # type: ignore[misc]
