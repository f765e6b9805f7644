import json
from html import escape
from pathlib import Path

from wren.head import head

POSTS_FILE = Path(__file__).parents[1] / "posts.json"

prerender = True


def loader(ctx):
    posts = json.loads(POSTS_FILE.read_text(encoding="utf-8"))
    return {"posts": [{"slug": slug, "title": post["title"]} for slug, post in posts.items()]}


def component(data, params):
    head("<title>Journal</title>")
    items = "".join(
        f'<li><a href="/posts/{post["slug"]}">{escape(post["title"])}</a></li>' for post in data["posts"]
    )
    return f"<h1>Journal</h1><ul>{items}</ul>"
