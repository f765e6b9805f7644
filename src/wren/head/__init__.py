"""Document-head metadata collected while pages and layouts render.

Usage::

    from wren.head import head

    def component(data, params):
        head("<title>Blog</title>", '<meta name="section" content="blog">')
        return "<h1>Blog</h1>"
"""

from wren.head.dom import HeadSync, apply_head, reconcile_head
from wren.head.registry import HeadRegistry, HeadSession, HeadToken, head, head_scope

__all__ = [
    "HeadRegistry",
    "HeadSession",
    "HeadSync",
    "HeadToken",
    "apply_head",
    "head",
    "head_scope",
    "reconcile_head",
]
