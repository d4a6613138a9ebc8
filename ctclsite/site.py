"""Assemble the immutable site snapshot from configuration, themes, fonts, and pages."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from .config import Config, load_config
from .errors import EmptyRegistryError, IOFailureError, NotFoundError
from .favicons import generate_favicons
from .models import PageRegistry, load_pages
from .staging import collect_static_assets
from .themes import FontFamily, Theme, load_fonts, load_themes

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Read-only snapshot shared by every page resolution."""

    config: Config
    themes: Mapping[str, Theme]
    fonts: Mapping[str, FontFamily]
    pages: PageRegistry

    @property
    def siteurl(self) -> str:
        return self.config.siteurl

    @property
    def output_root(self) -> Path:
        return self.config.outputpath

    def resolve_content(self, path: str) -> Path:
        """Locate a Markdown source declared by a page; relative paths live under the page tree."""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.config.pagepath / candidate


@dataclass
class _SiteAssembly:
    """Mutable staging value used only while the snapshot is being loaded."""

    config: Config
    fonts: dict[str, FontFamily] = field(default_factory=dict)
    themes: dict[str, Theme] = field(default_factory=dict)
    pages: PageRegistry = field(default_factory=PageRegistry)

    def freeze(self) -> SiteConfig:
        return SiteConfig(
            config=self.config,
            themes=MappingProxyType(dict(self.themes)),
            fonts=MappingProxyType(dict(self.fonts)),
            pages=self.pages,
        )


def load_site_config(path: str | Path) -> SiteConfig:
    """Load configuration and build the site snapshot.

    Themes are loaded before favicons, static collection, and pages because each
    of those depends on them. Any failure aborts the whole load.
    """
    return build_site_config(load_config(path))


def build_site_config(config: Config) -> SiteConfig:
    """Run the load stages for an already parsed configuration."""
    assembly = _SiteAssembly(config=config)

    try:
        config.outputpath.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IOFailureError(f"Can't create output directory {config.outputpath}: {exc}", path=config.outputpath) from exc

    assembly.fonts = load_fonts(config.fontpath)
    logger.debug("Loaded %d font family(ies).", len(assembly.fonts))

    assembly.themes = load_themes(config.themepath)
    if not assembly.themes:
        raise EmptyRegistryError("No themes found", path=config.themepath)
    logger.debug("Loaded %d theme(s).", len(assembly.themes))

    favicons = generate_favicons(assembly.themes, config.outputpath)
    logger.debug("Favicons: %d generated, %d already present.", len(favicons.generated), len(favicons.skipped))

    collect_static_assets(config)

    assembly.pages = load_pages(config.pagecfgpaths, assembly.themes)

    if assembly.pages.is_empty:
        raise EmptyRegistryError("No pages found", path=config.pagecfgpaths.about.parent)
    if config.defaulttheme not in assembly.themes:
        raise NotFoundError(f"Default theme '{config.defaulttheme}' not found", path=config.themepath)

    logger.info(
        "Loaded site: %d page(s), %d theme(s), %d font family(ies).",
        assembly.pages.total,
        len(assembly.themes),
        len(assembly.fonts),
    )
    return assembly.freeze()
