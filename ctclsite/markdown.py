"""Shared Markdown rendering helpers."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import cast

from markdown_it import MarkdownIt
from mdit_py_plugins.anchors import anchors_plugin

from .errors import IOFailureError, NotFoundError


@lru_cache(maxsize=2)
def _renderer(heading_anchors: bool) -> MarkdownIt:
    """Configure and cache a CommonMark renderer with raw HTML and tables."""
    md = MarkdownIt("commonmark", {"html": True})
    md.enable("table").enable("strikethrough")
    if heading_anchors:
        md.use(anchors_plugin, min_level=1, max_level=6)
    return md


def render_markdown(text: str, *, heading_anchors: bool = False) -> str:
    """Render Markdown to HTML using the shared renderer."""
    if not text.strip():
        return ""
    return cast(str, _renderer(heading_anchors).render(text))


def render_markdown_file(path: str | Path, *, heading_anchors: bool) -> str:
    """Read a Markdown source file and render it to HTML.

    The file is read on every call. ``heading_anchors`` adds ``id``
    attributes to headings so singular content pages can be deep-linked.
    """
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise NotFoundError(f"Markdown source {source} not found", path=source) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise IOFailureError(f"Can't read Markdown source {source}: {exc}", path=source) from exc
    return render_markdown(text, heading_anchors=heading_anchors)
