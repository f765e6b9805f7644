"""Project configuration.

WrenConfig is a frozen dataclass. It is immutable after creation and read
through attributes rather than string keys.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class WrenConfig:
    """Project configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = WrenConfig(pages_dir="site/pages", out_dir="build")
    """

    # Pages
    pages_dir: str | Path = "pages"
    extensions: tuple[str, ...] = (".py",)
    not_found_path: str = "/404"

    # Templates (kida): defaults to the pages directory
    template_dir: str | Path | None = None
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Document
    root_element_id: str = "root"
    scripts: tuple[str, ...] = ()
    preload_scripts: tuple[str, ...] = ()
    include_initial_data_script: bool = True

    # Static site generation
    base_url: str = "http://localhost"
    out_dir: str | Path = "dist/static"
    client_dir: str | Path | None = None  # Client assets copied to <out_dir>/client

    # Client router
    prefetch: bool = True

    debug: bool = False

    @property
    def resolved_template_dir(self) -> Path:
        """Directory kida loads page and layout templates from."""
        return Path(self.template_dir if self.template_dir is not None else self.pages_dir)
