"""Route discovery, whole-site checks, and writing rendered pages to disk."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from .context import build_context
from .errors import ConfigInvalidError, IOFailureError, SiteError
from .models import LinkPage
from .site import SiteConfig
from .templates import TemplateRenderer

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.html"


def normalize_link(link: str) -> str:
    """Normalize a route path: leading slash, no trailing slash (except the root)."""
    text = link.strip()
    if not text.startswith("/"):
        text = f"/{text}"
    return text.rstrip("/") or "/"


def iter_routes(site: SiteConfig) -> Iterator[tuple[str, str, str]]:
    """Yield ``(link, category, page_id)`` for every page that renders a body."""
    for category, pages in site.pages.items():
        for page_id, page in pages.items():
            if isinstance(page, LinkPage):
                continue
            yield normalize_link(page.link), category, page_id


def build_route_table(site: SiteConfig) -> dict[str, tuple[str, str]]:
    """Map normalized page links to ``(category, page_id)``."""
    routes: dict[str, tuple[str, str]] = {}
    for link, category, page_id in iter_routes(site):
        existing = routes.get(link)
        if existing is not None:
            raise ConfigInvalidError(
                f"Link '{link}' is used by both {existing[0]}/{existing[1]} and {category}/{page_id}"
            )
        routes[link] = (category, page_id)
    return routes


def render_route(site: SiteConfig, renderer: TemplateRenderer, category: str, page_id: str) -> str:
    context = build_context(site, category, page_id)
    return renderer.render_page(category, context["pagetype"], context)


@dataclass(slots=True)
class PageIssue:
    """A page whose context could not be resolved."""

    category: str
    page_id: str
    message: str
    kind: str


@dataclass(slots=True)
class CheckReport:
    """Aggregate resolution results for every routable page."""

    issues: list[PageIssue] = field(default_factory=list)
    page_count: int = 0

    @property
    def ok(self) -> bool:
        return not self.issues


def check_site(site: SiteConfig, renderer: TemplateRenderer | None = None) -> CheckReport:
    """Resolve every routable page, recording failures instead of stopping at the first."""
    report = CheckReport()
    try:
        build_route_table(site)
    except ConfigInvalidError as exc:
        report.issues.append(PageIssue(category="*", page_id="*", message=str(exc), kind=type(exc).__name__))

    for _, category, page_id in iter_routes(site):
        report.page_count += 1
        try:
            if renderer is None:
                build_context(site, category, page_id)
            else:
                render_route(site, renderer, category, page_id)
        except SiteError as exc:
            report.issues.append(
                PageIssue(category=category, page_id=page_id, message=str(exc), kind=type(exc).__name__)
            )
    return report


def write_site(site: SiteConfig, renderer: TemplateRenderer, destination: Path) -> list[Path]:
    """Render every routable page to ``<destination>/<link>/index.html`` and copy static assets."""
    written: list[Path] = []
    for link, (category, page_id) in build_route_table(site).items():
        html = render_route(site, renderer, category, page_id)
        relative = Path(link.lstrip("/"))
        if ".." in relative.parts:
            raise ConfigInvalidError(f"Link '{link}' of {category}/{page_id} must stay inside the site root")
        target = destination / relative / INDEX_FILENAME
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(html, encoding="utf-8")
        except OSError as exc:
            raise IOFailureError(f"Can't write {target}: {exc}", path=target) from exc
        written.append(target)

    static_target = destination / "static"
    if site.output_root.resolve() != static_target.resolve():
        try:
            shutil.copytree(site.output_root, static_target, dirs_exist_ok=True)
        except OSError as exc:
            raise IOFailureError(f"Can't copy static assets to {static_target}: {exc}", path=static_target) from exc
    logger.info("Wrote %d page(s) to %s", len(written), destination)
    return written
