"""Router configuration.

RouterOptions is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass

from perch._internal.types import ErrorHandler, OtherHandler, UnknownMethodHandler


@dataclass(frozen=True, slots=True)
class RouterOptions:
    """The router's fallback chain. Immutable after creation.

    Every field is optional; ``None`` selects the built-in handler from
    ``perch.server.defaults``. Override what you need::

        options = RouterOptions(other_handler=lambda req, ctx: Response("nope", 404))
    """

    # No route matched: (request, ctx) -> response.  Default: 404, empty body
    other_handler: OtherHandler | None = None

    # Any handler or parameter decoding raised: (request, ctx, error) -> response.
    # Default: 500, empty body, error logged on the "perch.server" logger
    error_handler: ErrorHandler | None = None

    # Route matched, method did not: (request, ctx, known_methods) -> response.
    # Default: 405, empty body, Accept header listing known_methods
    unknown_method_handler: UnknownMethodHandler | None = None
