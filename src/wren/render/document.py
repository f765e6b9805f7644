"""Full-document assembly and initial-data serialization.

The server (and the static site generator) wrap a render result in a
complete HTML document.  Loader data is embedded as JSON in an inline
script that runs before the client entry, so ``<``, ``>``, and ``&``
are escaped to ``\\u003c``, ``\\u003e``, ``\\u0026`` to keep the payload from
closing the script or opening markup.
"""

import dataclasses
import json
from collections.abc import Sequence
from typing import Any, Literal

_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026"}
_ESCAPE_TABLE = str.maketrans(_ESCAPES)


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def serialize_data(data: Any) -> str:
    """Serialize *data* as compact JSON that is safe inside ``<script>``.

    ``None`` serializes to ``null``; the output parses back to the same
    value with any JSON parser.
    """
    raw = json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=_json_default)
    return raw.translate(_ESCAPE_TABLE)


def generate_html(
    *,
    html: str,
    head: str = "",
    initial_data: Any = None,
    include_initial_data_script: bool = True,
    scripts: Sequence[str] = (),
    preload_scripts: Sequence[str] = (),
    script_placement: Literal["head", "body"] = "body",
    lang: str = "en",
) -> str:
    """Assemble a complete HTML document around rendered page markup.

    Args:
        html: Body markup (usually the root element with the page inside).
        head: Head markup collected from the render.
        initial_data: Loader data handed to the client router.
        include_initial_data_script: Emit ``window.__INITIAL_DATA__``.
            Prerendered pages turn this off.
        scripts: Module script URLs for the client entry.
        preload_scripts: URLs emitted as ``<link rel="modulepreload">``.
        script_placement: Put module scripts at the end of ``<head>``
            or ``<body>``.
        lang: Document language.
    """
    head_parts = [
        '<meta charset="UTF-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
    ]
    if head:
        head_parts.append(head)
    head_parts.extend(f'<link rel="modulepreload" href="{src}">' for src in preload_scripts)

    script_parts: list[str] = []
    if include_initial_data_script:
        script_parts.append(f"<script>window.__INITIAL_DATA__ = {serialize_data(initial_data)}</script>")
    script_parts.extend(f'<script type="module" src="{src}"></script>' for src in scripts)

    body_parts = [html]
    if script_placement == "head":
        head_parts.extend(script_parts)
    else:
        body_parts.extend(script_parts)

    head_html = "\n".join(f"  {part}" for part in head_parts)
    body_html = "\n".join(f"  {part}" for part in body_parts)
    return (
        "<!DOCTYPE html>\n"
        f'<html lang="{lang}">\n'
        "<head>\n"
        f"{head_html}\n"
        "</head>\n"
        "<body>\n"
        f"{body_html}\n"
        "</body>\n"
        "</html>\n"
    )
