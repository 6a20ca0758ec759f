"""Test utilities for pdfhost.

Provides an in-process ASGI test client::

    from pdfhost.testing import TestClient
"""

from pdfhost.testing.client import TestClient

__all__ = ["TestClient"]
