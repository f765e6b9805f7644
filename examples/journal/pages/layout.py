from html import escape

from wren.head import head


def component(children, **props):
    head('<link rel="stylesheet" href="/site.css">')
    links = '<a href="/">Journal</a> <a href="/about">About</a>'
    return f"<nav>{links}</nav><main>{children}</main><footer>{escape('Notes & sightings')}</footer>"
