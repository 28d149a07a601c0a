"""Test utilities for snippetbox.

::

    from snippetbox.testing import TestClient, asgi_app, extract_csrf_token
"""

from snippetbox.testing.client import TestClient, asgi_app, extract_csrf_token

__all__ = ["TestClient", "asgi_app", "extract_csrf_token"]
