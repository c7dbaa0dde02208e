"""Test utilities for perch routers.

Provides an in-process ASGI test client::

    from perch.testing import TestClient
"""

from perch.testing.client import TestClient

__all__ = ["TestClient"]
