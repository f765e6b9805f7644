"""Tests for wren.config: WrenConfig frozen dataclass."""

from pathlib import Path

import pytest

from wren.config import WrenConfig


class TestWrenConfig:
    def test_defaults(self) -> None:
        cfg = WrenConfig()

        assert cfg.pages_dir == "pages"
        assert cfg.extensions == (".py",)
        assert cfg.not_found_path == "/404"
        assert cfg.template_dir is None
        assert cfg.autoescape is True
        assert cfg.root_element_id == "root"
        assert cfg.scripts == ()
        assert cfg.include_initial_data_script is True
        assert cfg.base_url == "http://localhost"
        assert cfg.out_dir == "dist/static"
        assert cfg.client_dir is None
        assert cfg.prefetch is True
        assert cfg.debug is False

    def test_override(self) -> None:
        cfg = WrenConfig(pages_dir="site/pages", out_dir="build", scripts=("/entry.js",))

        assert cfg.pages_dir == "site/pages"
        assert cfg.out_dir == "build"
        assert cfg.scripts == ("/entry.js",)

    def test_frozen(self) -> None:
        cfg = WrenConfig()
        with pytest.raises(AttributeError):
            cfg.debug = True  # type: ignore[misc]

    def test_template_dir_defaults_to_pages(self) -> None:
        assert WrenConfig(pages_dir="site").resolved_template_dir == Path("site")

    def test_template_dir_override(self) -> None:
        cfg = WrenConfig(pages_dir="site", template_dir=Path("templates"))
        assert cfg.resolved_template_dir == Path("templates")
