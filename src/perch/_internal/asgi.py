"""ASGI type aliases.

Raw ASGI types matching the ASGI 3.0 spec. Only the server layer and
``Request.from_asgi`` touch these; handlers see ``Request`` and
``HandlerContext`` instead.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]
