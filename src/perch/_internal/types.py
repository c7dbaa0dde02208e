"""Shared type aliases used across perch modules."""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeAlias

# A handler may return its response directly or an awaitable of it
MaybeAwaitable: TypeAlias = Any | Awaitable[Any]

# Match handler: (request, ctx, params) with decoded path parameters
Handler: TypeAlias = Callable[[Any, Any, Mapping[str, str]], MaybeAwaitable]

# Other handler: (request, ctx) when no route matched
OtherHandler: TypeAlias = Callable[[Any, Any], MaybeAwaitable]

# Error handler: (request, ctx, error) for any failure during dispatch
ErrorHandler: TypeAlias = Callable[[Any, Any, Exception], MaybeAwaitable]

# Unknown-method handler: (request, ctx, known_methods) on method mismatch
UnknownMethodHandler: TypeAlias = Callable[[Any, Any, list[str]], MaybeAwaitable]
