"""Typed representations of declarative page records."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Annotated, Any, Iterator, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .config import PageCfgPaths
from .errors import ConfigInvalidError, IOFailureError, NotFoundError
from .themes import Theme

logger = logging.getLogger(__name__)

PAGE_CATEGORIES: tuple[str, ...] = ("about", "blog", "linklist", "projects", "services")


class Section(BaseModel):
    """One full-viewport-capable block of a sectioned page."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    theme: str
    title: str
    content: str = Field(description="Path to the Markdown source, or rendered HTML once resolved.")
    fitscreen: bool = Field(default=True, description="Give the section the height of the viewport.")
    bgvid: Optional[str] = Field(default=None)
    bgimg: Optional[str] = Field(default=None)


class Category(BaseModel):
    """A grouping tab within a linklist page."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str
    theme: str


class PageBase(BaseModel):
    """Fields shared by every page type."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: str
    link: str = Field(description="Route path, or an external URL for link pages.")
    theme: str
    title: str
    desc: Optional[str] = Field(default=None)
    keywords: Optional[str] = Field(default=None)
    favicon: Optional[str] = Field(default=None)
    icon: Optional[str] = Field(default=None)
    icontitle: Optional[str] = Field(default=None)
    cat: Optional[str] = Field(default=None, description="Linklist category this entry belongs to.")
    date: Optional[str] = Field(default=None)
    shownavbar: bool = Field(default=True)
    menu: Optional[list[str]] = Field(default=None, description="Sibling page ids shown as a menu.")

    def theme_refs(self) -> Iterator[tuple[str, str]]:
        """Yield ``(location, theme_id)`` for every theme this page references."""
        yield "page", self.theme


class SectionsPage(PageBase):
    """A page made up of ordered sections."""

    type: Literal["sections"]
    sections: dict[str, Section]

    def theme_refs(self) -> Iterator[tuple[str, str]]:
        yield from super().theme_refs()
        for name, section in self.sections.items():
            yield f"section '{name}'", section.theme


class ContentPage(PageBase):
    """A single prose page such as About or a blog post."""

    type: Literal["content"]
    content: str


class LinklistPage(PageBase):
    """A page listing external links grouped into categories."""

    type: Literal["linklist"]
    cats: dict[str, Category]

    def theme_refs(self) -> Iterator[tuple[str, str]]:
        yield from super().theme_refs()
        for cat_id, category in self.cats.items():
            yield f"category '{cat_id}'", category.theme


class LinkPage(PageBase):
    """Routing metadata only: a link with no body to render."""

    type: Literal["link"]


Page = Annotated[
    Union[SectionsPage, ContentPage, LinklistPage, LinkPage],
    Field(discriminator="type"),
]

_PAGE_ADAPTER: TypeAdapter[Any] = TypeAdapter(Page)
_PAGE_MAP_ADAPTER: TypeAdapter[Any] = TypeAdapter(dict[str, Page])


def parse_page(data: Any) -> PageBase:
    """Validate a single page record."""
    return _PAGE_ADAPTER.validate_python(data)


def dump_page(page: PageBase) -> dict[str, Any]:
    """Serialize a page to JSON-compatible data containing only explicitly set fields."""
    return page.model_dump(mode="json", exclude_unset=True)


@dataclass(frozen=True, slots=True)
class PageRegistry:
    """Pages indexed by category and page id."""

    about: Mapping[str, PageBase] = field(default_factory=lambda: MappingProxyType({}))
    blog: Mapping[str, PageBase] = field(default_factory=lambda: MappingProxyType({}))
    linklist: Mapping[str, PageBase] = field(default_factory=lambda: MappingProxyType({}))
    projects: Mapping[str, PageBase] = field(default_factory=lambda: MappingProxyType({}))
    services: Mapping[str, PageBase] = field(default_factory=lambda: MappingProxyType({}))

    def category(self, name: str) -> Mapping[str, PageBase]:
        if name not in PAGE_CATEGORIES:
            raise NotFoundError(f"Page category '{name}' not found")
        return getattr(self, name)

    def items(self) -> Iterator[tuple[str, Mapping[str, PageBase]]]:
        for name in PAGE_CATEGORIES:
            yield name, getattr(self, name)

    @property
    def total(self) -> int:
        return sum(len(pages) for _, pages in self.items())

    @property
    def is_empty(self) -> bool:
        return self.total == 0


def load_pages(paths: PageCfgPaths, themes: Mapping[str, Theme]) -> PageRegistry:
    """Load every category's page file and check theme references against ``themes``."""
    loaded: dict[str, Mapping[str, PageBase]] = {}
    for category in PAGE_CATEGORIES:
        source: Path = getattr(paths, category)
        pages = _load_page_file(source)
        for page_id, page in pages.items():
            for location, theme_id in page.theme_refs():
                if theme_id not in themes:
                    raise NotFoundError(
                        f"Theme '{theme_id}' referenced by {location} of {category} page '{page_id}' not found",
                        path=source,
                    )
        logger.debug("Loaded %d %s page(s) from %s", len(pages), category, source)
        loaded[category] = MappingProxyType(pages)
    return PageRegistry(**loaded)


def _load_page_file(path: Path) -> dict[str, PageBase]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise NotFoundError(f"Page file {path} not found", path=path) from exc
    except json.JSONDecodeError as exc:
        raise ConfigInvalidError(f"Malformed JSON in {path}: {exc}", path=path) from exc
    except OSError as exc:
        raise IOFailureError(f"Can't read {path}: {exc}", path=path) from exc
    try:
        return _PAGE_MAP_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise ConfigInvalidError(f"Page validation failed for {path}: {exc}", path=path) from exc
