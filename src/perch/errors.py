"""perch exception hierarchy.

Shared across the builder, the dispatcher and the built-in handlers so
every module raises and catches the same types.
"""

from collections.abc import Sequence
from dataclasses import dataclass


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when route declarations are invalid.

    Typically raised while the route table is built, before the first
    request is served.
    """


class ParamDecodeError(PerchError, ValueError):
    """A captured path parameter is not valid percent-encoded UTF-8."""

    def __init__(self, name: str, value: str) -> None:
        super().__init__(f"Cannot decode path parameter {name!r}: {value!r}")
        self.name = name
        self.value = value


@dataclass(frozen=True, slots=True)
class HTTPError(PerchError):
    """An error that maps directly to an HTTP status code.

    Handlers may raise these; the default error handler answers with the
    error's status and headers instead of a generic 500.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request URL."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — a route matched but has no handler for this HTTP method.

    Carries an ``Accept`` header listing the route's known methods in
    the order they were registered.
    """

    def __init__(self, allowed: Sequence[str], detail: str = "") -> None:
        accept_value = ", ".join(allowed)
        default_detail = f"Method not allowed. Known methods: {accept_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Accept", accept_value),),
        )
