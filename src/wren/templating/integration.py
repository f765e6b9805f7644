"""Kida environment setup and template-backed components.

A page or layout module can export ``template = "blog/post.html"``
instead of a callable.  The scanner wraps that name in a
:class:`TemplateComponent`, which renders the template with the
component props (``data`` and ``params`` for pages, ``children`` for
layouts) as its context.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from kida import Environment, FileSystemLoader
from kida.template import Markup

from wren.config import WrenConfig
from wren.head.registry import head


def create_environment(
    config: WrenConfig,
    globals_: Mapping[str, Any] | None = None,
    filters: Mapping[str, Callable[..., Any]] | None = None,
) -> Environment:
    """Create a kida Environment rooted at the template directory.

    ``head`` is always available as a global so templates can
    contribute document-head fragments while they render.
    """
    env = Environment(
        loader=FileSystemLoader(str(config.resolved_template_dir)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )
    env.add_global("head", head)

    if filters:
        env.update_filters(dict(filters))

    for name, value in (globals_ or {}).items():
        env.add_global(name, value)

    return env


@dataclass(frozen=True, slots=True)
class TemplateComponent:
    """A component that renders a kida template with its props as context.

    When loader data is a mapping its keys are also top-level variables,
    so a template can write ``{{ title }}`` as well as ``{{ data.title }}``.
    """

    env: Environment
    name: str

    def __call__(self, **props: Any) -> Markup:
        context: dict[str, Any] = {}
        data = props.get("data")
        if isinstance(data, Mapping):
            context.update(data)
        context.update(props)
        template = self.env.get_template(self.name)
        return Markup(template.render(context))
