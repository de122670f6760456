"""Tests for the hello example."""

import pytest

from happyrouter.testing import TestClient

pytestmark = pytest.mark.anyio


class TestHelloApp:
    """Verify every route in the hello example works through the ASGI pipeline."""

    async def test_index(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/hello")
            assert response.status == 200
            assert response.text == "Hello, World!"

    async def test_index_trailing_slash(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/hello/")
            assert response.text == "Hello, World!"

    async def test_greet_with_path_param(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/hello/alice")
            assert response.status == 200
            assert response.text == "Hello, alice!"

    async def test_html_page(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/hello/page")
            assert response.header("content-type").startswith("text/html")

    async def test_json_response(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/hello/status")
            assert response.json() == {"status": "ok"}

    async def test_post_not_allowed(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/hello/status")
            assert response.status == 405
            assert response.header("allow") == "HEAD, GET"

    async def test_unknown_path_404(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/elsewhere")
            assert response.status == 404
