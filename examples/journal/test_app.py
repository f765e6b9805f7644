"""Tests for the journal example."""

from dataclasses import replace

from wren import run_ssg
from wren.testing import TestClient


class TestPages:
    async def test_index_lists_posts(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/")

        assert response.status == 200
        assert "<title>Journal</title>" in response.text
        assert '<a href="/posts/first-light">First Light</a>' in response.text
        assert "<nav>" in response.text

    async def test_post_page(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/posts/winter-nest")

        assert response.status == 200
        assert "<h1>Winter Nest</h1>" in response.text
        assert "<title>Winter Nest | Journal</title>" in response.text

    async def test_unknown_post_is_500(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/posts/missing")

        assert response.status == 500

    async def test_template_page(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/about")

        assert response.status == 200
        assert "<h1>About</h1>" in response.text
        assert "<title>About | Journal</title>" in response.text

    async def test_not_found_page(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/nowhere")

        assert response.status == 404
        assert "That page flew away." in response.text

    async def test_static_file(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/site.css")

        assert response.status == 200
        assert response.content_type.startswith("text/css")


class TestStaticBuild:
    async def test_builds_prerendered_pages(self, example_config, tmp_path) -> None:
        config = replace(example_config, out_dir=tmp_path / "dist")

        written = await run_ssg(config)

        assert {p.relative_to(tmp_path / "dist").as_posix() for p in written} == {
            "index.html",
            "posts/first-light/index.html",
            "posts/winter-nest/index.html",
        }
        html = (tmp_path / "dist" / "posts" / "first-light" / "index.html").read_text()
        assert "<h1>First Light</h1>" in html
        assert "__INITIAL_DATA__" not in html
