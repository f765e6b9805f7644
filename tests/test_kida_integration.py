"""Tests for wren.templating.integration: kida-backed components."""

from pathlib import Path

from kida.template import Markup

from wren.config import WrenConfig
from wren.head import HeadRegistry, head_scope
from wren.pages.routes import define_route
from wren.render.pipeline import render_page
from wren.templating.integration import TemplateComponent, create_environment


def _env(tmp_path: Path, **templates: str):
    for name, source in templates.items():
        (tmp_path / name).write_text(source, encoding="utf-8")
    return create_environment(WrenConfig(template_dir=tmp_path))


class TestCreateEnvironment:
    def test_head_global_registers(self, tmp_path: Path) -> None:
        env = _env(tmp_path)
        registry = HeadRegistry.server()
        with head_scope(registry):
            html = env.from_string('{{ head("<title>T</title>") }}<p>x</p>').render({})
        assert html == "<p>x</p>"
        assert registry.snapshot() == ["<title>T</title>"]

    def test_extra_globals(self, tmp_path: Path) -> None:
        env = create_environment(WrenConfig(template_dir=tmp_path), globals_={"site": "Wren"})
        assert env.from_string("{{ site }}").render({}) == "Wren"

    def test_template_dir_defaults_to_pages_dir(self, tmp_path: Path) -> None:
        (tmp_path / "hello.html").write_text("hello", encoding="utf-8")
        env = create_environment(WrenConfig(pages_dir=tmp_path))
        assert env.get_template("hello.html").render({}) == "hello"


class TestTemplateComponent:
    def test_props_are_context(self, tmp_path: Path) -> None:
        env = _env(tmp_path, **{"post.html": "<h1>{{ data }}</h1>"})
        component = TemplateComponent(env, "post.html")
        assert component(data="hi", params={}) == "<h1>hi</h1>"

    def test_mapping_data_is_flattened(self, tmp_path: Path) -> None:
        env = _env(tmp_path, **{"post.html": "<h1>{{ title }}</h1>"})
        component = TemplateComponent(env, "post.html")
        assert component(data={"title": "Hello"}, params={}) == "<h1>Hello</h1>"

    def test_autoescapes_data(self, tmp_path: Path) -> None:
        env = _env(tmp_path, **{"post.html": "<h1>{{ title }}</h1>"})
        component = TemplateComponent(env, "post.html")
        html = component(data={"title": "<script>"}, params={})
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_children_markup_not_escaped(self, tmp_path: Path) -> None:
        env = _env(tmp_path, **{"layout.html": "<main>{{ children }}</main>"})
        layout = TemplateComponent(env, "layout.html")
        assert layout(children=Markup("<p>inner</p>")) == "<main><p>inner</p></main>"

    async def test_through_render_page(self, tmp_path: Path) -> None:
        env = _env(
            tmp_path,
            **{
                "layout.html": '{{ head("<meta name=l>") }}<main>{{ children }}</main>',
                "page.html": '{{ head("<title>P</title>") }}<h1>{{ title }}</h1>',
            },
        )
        route = define_route(
            "/",
            TemplateComponent(env, "page.html"),
            loader=lambda ctx: {"title": "Page"},
            layouts=[TemplateComponent(env, "layout.html")],
        )

        result = await render_page("/", "http://localhost/", [route])

        assert result.html == "<main><h1>Page</h1></main>"
        assert result.head == "<title>P</title><meta name=l>"
