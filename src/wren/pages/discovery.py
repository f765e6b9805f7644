"""Filesystem route discovery for the pages directory.

Walks the pages tree and discovers:
- ``layout.<ext>`` files as layouts for their directory and below
- every other matching file as a page

Files and directories starting with ``_`` or ``.`` are ignored, so
helpers can live next to pages.  Page modules are not imported during
the scan: export hints (``loader``, ``get_static_paths``,
``prerender``) are read from the module's syntax tree, and the module
itself is loaded the first time its route is rendered.
"""

from __future__ import annotations

import ast
import importlib.util
import logging
import re
import sys
from collections.abc import Sequence
from dataclasses import replace
from functools import partial
from pathlib import Path
from types import ModuleType
from typing import Any

from kida import Environment

from wren.config import WrenConfig
from wren.errors import ConfigurationError
from wren.pages.unit import Component, LazyUnit, RenderUnit, as_head_fragments
from wren.routing.parser import parse_route, validate_routes
from wren.routing.table import RouteTable
from wren.templating.integration import TemplateComponent, create_environment

logger = logging.getLogger("wren.pages")

_LAYOUT_STEM = "layout"
_SKIP_DIRS = frozenset({"__pycache__", "node_modules"})
_HINT_NAMES = frozenset({"loader", "get_static_paths", "prerender"})
_MODULE_NAME_RE = re.compile(r"\W")


def scan_routes(
    pages_dir: str | Path,
    extensions: Sequence[str] = (".py",),
    env: Environment | None = None,
) -> RouteTable:
    """Discover every page under *pages_dir* and build a sorted route table.

    Args:
        pages_dir: Root of the pages tree.
        extensions: File suffixes treated as pages and layouts.  ``.py``
            files are imported; anything else is rendered as a kida
            template.
        env: Kida environment for template components.  Defaults to one
            rooted at *pages_dir*, created on first use.

    Returns:
        A :class:`RouteTable`.  Parse errors and duplicate patterns are
        reported in ``errors``; the scan itself never fails on them.
    """
    root = Path(pages_dir).resolve()
    if not root.is_dir():
        msg = f"Pages directory not found: {root}"
        raise ConfigurationError(msg)

    environment = _EnvironmentSlot(root, env)
    routes = []
    errors: list[str] = []

    for file in _walk(root, tuple(extensions)):
        parsed = parse_route(file, root)
        errors.extend(parsed.errors)

        layout_files = collect_layouts(file, root, extensions)
        hints = read_export_hints(file)
        route = replace(
            parsed.route,
            source=str(file),
            layouts=tuple(str(p) for p in layout_files),
            has_loader="loader" in hints,
            has_static_paths="get_static_paths" in hints,
            has_prerender="prerender" in hints,
            unit=LazyUnit(partial(load_render_unit, file, layout_files, environment)),
        )
        routes.append(route)

    table = RouteTable.build(routes, [*errors, *validate_routes(routes)])
    for error in table.errors:
        logger.warning("%s", error)
    logger.debug("Discovered %d routes under %s", len(table), root)
    return table


def _walk(directory: Path, extensions: tuple[str, ...]) -> list[Path]:
    """Page files under *directory*, depth first, sorted per directory."""
    files: list[Path] = []
    for item in sorted(directory.iterdir()):
        if item.name.startswith(("_", ".")):
            continue
        if item.is_dir():
            if item.name not in _SKIP_DIRS:
                files.extend(_walk(item, extensions))
        elif item.suffix in extensions and item.stem != _LAYOUT_STEM:
            files.append(item)
    return files


def collect_layouts(file: Path, root: Path, extensions: Sequence[str] = (".py",)) -> list[Path]:
    """Layout files applying to *file*, root layout first.

    Walks from the page's directory up to *root*; each directory
    contributes at most one layout (the first matching extension).
    """
    layouts: list[Path] = []
    directory = file.parent
    while True:
        for ext in extensions:
            candidate = directory / f"{_LAYOUT_STEM}{ext}"
            if candidate.is_file():
                layouts.append(candidate)
                break
        if directory == root or root not in directory.parents:
            break
        directory = directory.parent
    layouts.reverse()
    return layouts


def read_export_hints(file: Path) -> frozenset[str]:
    """Top-level names a page module defines, limited to the hinted exports.

    Non-Python pages and modules that fail to parse report no hints;
    the failure surfaces when the route is first rendered.
    """
    if file.suffix != ".py":
        return frozenset()
    try:
        tree = ast.parse(file.read_text(encoding="utf-8"), filename=str(file))
    except (OSError, SyntaxError, ValueError) as exc:
        logger.warning("Could not read export hints from %s: %s", file, exc)
        return frozenset()

    names: set[str] = set()
    for node in tree.body:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            names.add(node.name)
        elif isinstance(node, ast.Assign):
            for target in node.targets:
                if isinstance(target, ast.Name):
                    names.add(target.id)
        elif isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
            names.add(node.target.id)
        elif isinstance(node, (ast.Import, ast.ImportFrom)):
            for alias in node.names:
                names.add(alias.asname or alias.name.split(".")[0])
    return frozenset(names & _HINT_NAMES)


# ---------------------------------------------------------------------------
# Render unit loading
# ---------------------------------------------------------------------------


class _EnvironmentSlot:
    """Creates the default kida environment only when a template needs it."""

    __slots__ = ("_env", "_root")

    def __init__(self, root: Path, env: Environment | None) -> None:
        self._root = root
        self._env = env

    def get(self) -> Environment:
        if self._env is None:
            self._env = create_environment(WrenConfig(pages_dir=self._root))
        return self._env

    def template_name(self, file: Path) -> str:
        return file.relative_to(self._root).as_posix()


def load_render_unit(
    file: Path,
    layout_files: Sequence[Path],
    environment: _EnvironmentSlot,
) -> RenderUnit:
    """Import (or wrap) a page and its layouts into a :class:`RenderUnit`."""
    layouts = tuple(_load_layout(path, environment) for path in layout_files)

    if file.suffix != ".py":
        component = TemplateComponent(environment.get(), environment.template_name(file))
        return RenderUnit(component=component, layouts=layouts)

    module = _import_file(file)
    component = _component_from(module, ("component", "page"), environment)
    if component is None:
        msg = f"Page module {file} exports no component, page, or template"
        raise ConfigurationError(msg)

    logger.debug("Loaded page %s", file)
    return RenderUnit(
        component=component,
        loader=getattr(module, "loader", None),
        get_static_paths=getattr(module, "get_static_paths", None),
        prerender=getattr(module, "prerender", False) is True,
        client_only=getattr(module, "client_only", False) is True,
        layouts=layouts,
        head=_static_head(module),
    )


def _load_layout(file: Path, environment: _EnvironmentSlot) -> Component:
    if file.suffix != ".py":
        return TemplateComponent(environment.get(), environment.template_name(file))

    module = _import_file(file)
    component = _component_from(module, ("component", "layout"), environment)
    if component is None:
        msg = f"Layout module {file} exports no component, layout, or template"
        raise ConfigurationError(msg)
    return component


def _component_from(
    module: ModuleType,
    names: tuple[str, ...],
    environment: _EnvironmentSlot,
) -> Component | None:
    for name in names:
        value = getattr(module, name, None)
        if callable(value):
            return value
    template = getattr(module, "template", None)
    if isinstance(template, str):
        return TemplateComponent(environment.get(), template)
    return None


def _static_head(module: ModuleType) -> tuple[str, ...]:
    value: Any = getattr(module, "head", None)
    # A module that imports the head() helper has no static head.
    if callable(value):
        return ()
    return as_head_fragments(value)


def _import_file(file: Path) -> ModuleType:
    """Import a page or layout file under a private module name."""
    name = "_wren_page_" + _MODULE_NAME_RE.sub("_", str(file))
    spec = importlib.util.spec_from_file_location(name, file)
    if spec is None or spec.loader is None:
        msg = f"Cannot load page module {file}"
        raise ConfigurationError(msg)

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module
