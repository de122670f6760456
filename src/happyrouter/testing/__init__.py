"""Test utilities for happyrouter applications::

    from happyrouter.testing import TestClient
"""

from happyrouter.testing.client import TestClient, TestResponse

__all__ = ["TestClient", "TestResponse"]
