"""Resolve a page record into the context handed to templates."""

from __future__ import annotations

import copy
from typing import Any, Mapping

from .errors import InvalidInputError, NotFoundError
from .favicons import favicon_url
from .markdown import render_markdown_file
from .models import ContentPage, LinklistPage, LinkPage, PageBase, Section, SectionsPage
from .site import SiteConfig


def build_context(site: SiteConfig, category: str, page_id: str) -> dict[str, Any]:
    """Build the render context for ``page_id`` in ``category``.

    Reads Markdown sources but never writes to ``site``; safe to call from
    concurrent request handlers. Mutable values are copied, so callers may
    change the returned context freely.
    """
    pages = site.pages.category(category)

    page = pages.get(page_id)
    if page is None:
        raise NotFoundError(f"Page '{page_id}' not found in {category}")

    if isinstance(page, LinkPage):
        raise InvalidInputError(f"Page '{page_id}' is a link and not a page")

    theme = site.themes.get(page.theme)
    if theme is None:
        raise NotFoundError(f"Theme '{page.theme}' not found")

    config = site.config
    context: dict[str, Any] = {
        "category": category,
        "pageid": page_id,
        "pagetype": page.type,
        "link": f"{site.siteurl}{page.link}",
        "themename": page.theme,
        "themecolor": theme.color,
        "themefgcolor": theme.fgcolor,
        "title": page.title,
        "desc": page.desc,
        "keywords": page.keywords,
        "favicon": page.favicon if page.favicon is not None else favicon_url(page.theme),
        "shownavbar": page.shownavbar,
        "navbar": list(config.navbar),
        "themevars": copy.deepcopy(config.themevars),
        "uservars": copy.deepcopy(config.uservars),
    }

    if isinstance(page, SectionsPage):
        context["sections"] = _render_sections(site, page)
    elif isinstance(page, ContentPage):
        context["content"] = render_markdown_file(site.resolve_content(page.content), heading_anchors=True)
    elif isinstance(page, LinklistPage):
        context["cats"] = dict(page.cats)

    if page.menu is not None:
        context["menu"] = _resolve_menu(pages, category, page.menu)

    return context


def _render_sections(site: SiteConfig, page: SectionsPage) -> dict[str, Section]:
    rendered: dict[str, Section] = {}
    for name, section in page.sections.items():
        html = render_markdown_file(site.resolve_content(section.content), heading_anchors=False)
        rendered[name] = section.model_copy(update={"content": html})
    return rendered


def _resolve_menu(pages: Mapping[str, PageBase], category: str, entries: list[str]) -> list[PageBase]:
    resolved: list[PageBase] = []
    for entry in entries:
        page = pages.get(entry)
        if page is None:
            raise NotFoundError(f"Menu entry '{entry}' not found in {category}")
        resolved.append(page)
    return resolved
