"""Path templates and the pattern protocol the router matches with.

The router only needs one capability from a pattern: given the request
URL, say whether it matches and, if so, which named parameters were
captured (still percent-encoded). ``RoutePattern`` is that contract.

Two implementations ship:

``PathPattern``
    The template syntax used in route keys. Matched against the URL's
    path component, anchored at both ends::

        "/users"              literal text
        "/users/:id"          named parameter, one or more non-"/" chars
        "/files/:name(.+)"    named parameter with a custom regex
        "/api{/}?"            optional group: "/api" or "/api/"
        "/posts{/:slug}?"     optional group with a parameter inside

    Percent-escapes in the request path are compared case-insensitively
    (``/caf%c3%a9`` matches the template ``/café``).

``RegexPattern``
    A raw regular expression searched against the full URL; named
    groups become parameters.
"""

from __future__ import annotations

import re
from typing import Protocol, runtime_checkable
from urllib.parse import quote, urlsplit

from perch.errors import ConfigurationError

# Parameter names follow Python identifier rules so they are valid group names
_PARAM_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_SEGMENT = r"[^/]+"
_ESCAPE = re.compile(r"%[0-9A-Fa-f]{2}")

# Characters that stay as-is when a template literal is encoded for the wire
_LITERAL_SAFE = "/!$&'()*+,;=:@-._~%"


@runtime_checkable
class RoutePattern(Protocol):
    """Anything the router can match a request URL against."""

    @property
    def source(self) -> str: ...

    def match(self, url: str) -> dict[str, str] | None:
        """Return captured parameters on a match, ``None`` otherwise."""
        ...


class PathPattern:
    """A compiled path template. See the module docstring for the syntax."""

    __slots__ = ("_regex", "_template", "param_names")

    def __init__(self, template: str) -> None:
        self._template = template
        regex, names = _translate(_ESCAPE.sub(_upper, template))
        self._regex = regex
        self.param_names: tuple[str, ...] = names

    @property
    def source(self) -> str:
        return self._template

    @property
    def regex(self) -> re.Pattern[str]:
        """The compiled regular expression (unanchored; matched with fullmatch)."""
        return self._regex

    def match(self, url: str) -> dict[str, str] | None:
        path = urlsplit(url).path or "/"
        if "%" in path:
            # Template literals are encoded with uppercase hex
            path = _ESCAPE.sub(_upper, path)
        m = self._regex.fullmatch(path)
        if m is None:
            return None
        # Parameters inside an absent optional group are left out
        return {name: value for name, value in m.groupdict().items() if value is not None}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathPattern):
            return NotImplemented
        return self._template == other._template

    def __hash__(self) -> int:
        return hash(self._template)

    def __repr__(self) -> str:
        return f"PathPattern({self._template!r})"


def _upper(match: re.Match[str]) -> str:
    return match.group().upper()


class RegexPattern:
    """A raw regular expression, searched against the full request URL."""

    __slots__ = ("_regex",)

    def __init__(self, regex: str | re.Pattern[str]) -> None:
        try:
            self._regex = re.compile(regex)
        except re.error as exc:
            msg = f"Invalid route regex {regex!r}: {exc}"
            raise ConfigurationError(msg) from exc

    @property
    def source(self) -> str:
        return self._regex.pattern

    @property
    def regex(self) -> re.Pattern[str]:
        return self._regex

    def match(self, url: str) -> dict[str, str] | None:
        m = self._regex.search(url)
        if m is None:
            return None
        return {name: value for name, value in m.groupdict().items() if value is not None}

    def __repr__(self) -> str:
        return f"RegexPattern({self._regex.pattern!r})"


def compile_pattern(value: RoutePattern | str | re.Pattern[str]) -> RoutePattern:
    """Coerce a template string, compiled regex or custom pattern to a ``RoutePattern``."""
    if isinstance(value, str):
        return PathPattern(value)
    if isinstance(value, re.Pattern):
        return RegexPattern(value)
    if isinstance(value, RoutePattern):
        return value
    msg = f"Cannot use {type(value).__name__} as a route pattern"
    raise ConfigurationError(msg)


def _translate(template: str) -> tuple[re.Pattern[str], tuple[str, ...]]:
    """Translate a path template into a regex and its parameter names.

    Raises ``ConfigurationError`` for malformed templates.
    """
    parts: list[str] = []
    names: list[str] = []
    in_group = False
    i = 0
    n = len(template)

    while i < n:
        char = template[i]

        if char == ":" and (name_match := _PARAM_NAME.match(template, i + 1)):
            name = name_match.group()
            if name in names:
                msg = f"Duplicate parameter {name!r} in route {template!r}"
                raise ConfigurationError(msg)
            names.append(name)
            i = name_match.end()
            segment = _SEGMENT
            if i < n and template[i] == "(":
                segment, i = _read_custom_regex(template, i)
            parts.append(f"(?P<{name}>{segment})")
            continue

        if char == "{":
            if in_group:
                msg = f"Nested optional groups are not supported: {template!r}"
                raise ConfigurationError(msg)
            in_group = True
            parts.append("(?:")
            i += 1
            continue

        if char == "}":
            if not in_group:
                msg = f"Unbalanced '}}' in route {template!r}"
                raise ConfigurationError(msg)
            if template[i + 1 : i + 2] != "?":
                msg = f"Groups must be optional ('{{...}}?') in route {template!r}"
                raise ConfigurationError(msg)
            in_group = False
            parts.append(")?")
            i += 2
            continue

        parts.append(re.escape(quote(char, safe=_LITERAL_SAFE)))
        i += 1

    if in_group:
        msg = f"Unterminated '{{' in route {template!r}"
        raise ConfigurationError(msg)

    return re.compile("".join(parts)), tuple(names)


def _read_custom_regex(template: str, start: int) -> tuple[str, int]:
    """Read a ``(regex)`` constraint beginning at *start*.

    Returns the regex and the index just past the closing parenthesis.
    """
    depth = 0
    i = start
    while i < len(template):
        char = template[i]
        if char == "\\":
            i += 2
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                break
        i += 1
    else:
        msg = f"Unterminated parameter regex in route {template!r}"
        raise ConfigurationError(msg)

    regex = template[start + 1 : i]
    try:
        compiled = re.compile(regex)
    except re.error as exc:
        msg = f"Invalid parameter regex {regex!r} in route {template!r}: {exc}"
        raise ConfigurationError(msg) from exc
    if compiled.groups:
        msg = f"Parameter regex {regex!r} must not contain capturing groups"
        raise ConfigurationError(msg)
    return regex, i + 1
