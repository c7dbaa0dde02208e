"""Built-in fallback handlers.

Used by the router for every ``RouterOptions`` field left as ``None``.
All three answer with an empty body; only the status and headers carry
information.
"""

import logging
from collections.abc import Sequence
from typing import Any

from perch.errors import HTTPError, MethodNotAllowed, NotFound
from perch.http.request import Request
from perch.http.response import Response

logger = logging.getLogger("perch.server")


def error_response(error: HTTPError) -> Response:
    """An empty-bodied response carrying an HTTPError's status and headers."""
    return Response(status=error.status, headers=error.headers)


def default_other_handler(request: Request, ctx: Any) -> Response:
    """No route matched: 404 with an empty body."""
    return error_response(NotFound())


def default_unknown_method_handler(
    request: Request,
    ctx: Any,
    known_methods: Sequence[str],
) -> Response:
    """A route matched but not the method: 405 listing *known_methods* in ``Accept``."""
    return error_response(MethodNotAllowed(known_methods))


def default_error_handler(request: Request, ctx: Any, error: Exception) -> Response:
    """Any failure during dispatch: log it and answer 500 with an empty body.

    ``HTTPError``s raised by handlers also answer 500. To honour their
    status, pass an ``error_handler`` that returns ``error_response(error)``.
    """
    logger.error("500 %s %s", request.method, request.path, exc_info=error)
    return Response(status=500)
