"""Test utilities for wren sites.

Provides an ASGI test client for :class:`~wren.server.app.PagesApp`
and an in-memory browser for the client router::

    from wren.testing import MemoryBrowser, TestClient

    async with TestClient(app) as client:
        response = await client.get("/blog/hello-world")

    browser = MemoryBrowser("http://localhost/", initial_data={"title": "Home"})
    browser.add_element("root", "<h1>Home</h1>")
    router = await start_router(routes, browser)
    browser.click("/blog/hello-world")
    await router.settle()
"""

from wren.testing.browser import MemoryBrowser, MemoryElement
from wren.testing.client import TestClient

__all__ = [
    "MemoryBrowser",
    "MemoryElement",
    "TestClient",
]
