"""Jinja2 rendering of page contexts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplatesNotFound, select_autoescape

from .errors import NotFoundError

logger = logging.getLogger(__name__)


class TemplateError(NotFoundError):
    """Raised when no template exists for a page."""


class TemplateRenderer:
    """Render page contexts with templates keyed by category and page type."""

    def __init__(self, template_dir: Path) -> None:
        if not template_dir.is_dir():
            raise TemplateError(f"Template directory {template_dir} not found", path=template_dir)
        self._template_dir = template_dir
        self._environment = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @staticmethod
    def candidates(category: str, page_type: str) -> list[str]:
        """Template names tried for a page, most specific first."""
        return [f"{category}/{page_type}.html", f"{page_type}.html"]

    def render_page(self, category: str, page_type: str, context: dict[str, Any]) -> str:
        names = self.candidates(category, page_type)
        try:
            template = self._environment.select_template(names)
        except TemplatesNotFound as exc:
            raise TemplateError(
                f"No template for {category} page of type '{page_type}' (tried {', '.join(names)})",
                path=self._template_dir,
            ) from exc
        logger.debug("Rendering %s with %s", context.get("pageid"), template.name)
        return template.render(**context)
