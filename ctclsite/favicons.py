"""Generate default favicons from theme accent colors."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from PIL import Image

from .errors import ConfigInvalidError, IOFailureError
from .themes import Theme

logger = logging.getLogger(__name__)

FAVICON_DIRNAME = "favicons"
FAVICON_SIZE = (16, 16)
STATIC_URL_PREFIX = "static/"


@dataclass
class FaviconResult:
    """Theme ids whose favicons were written or already present."""

    generated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def favicon_filename(theme_id: str) -> str:
    return f"default_{theme_id}.ico"


def favicon_url(theme_id: str) -> str:
    """Site-relative URL of the default favicon for ``theme_id``."""
    return f"{STATIC_URL_PREFIX}{FAVICON_DIRNAME}/{favicon_filename(theme_id)}"


def decode_hex_color(value: str) -> tuple[int, int, int]:
    """Decode ``#rrggbb`` (the ``#`` is optional) into an RGB triple."""
    text = value.strip().removeprefix("#")
    if len(text) != 6:
        raise ValueError(f"expected 6 hex digits, got '{value}'")
    raw = bytes.fromhex(text)
    return raw[0], raw[1], raw[2]


def generate_favicons(themes: Mapping[str, Theme], output_root: Path) -> FaviconResult:
    """Write a 16x16 solid favicon per theme unless it already exists."""
    result = FaviconResult()
    favicon_dir = output_root / FAVICON_DIRNAME
    try:
        favicon_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IOFailureError(f"Can't create {favicon_dir}: {exc}", path=favicon_dir) from exc

    for theme_id, theme in themes.items():
        destination = favicon_dir / favicon_filename(theme_id)
        if destination.exists():
            result.skipped.append(theme_id)
            continue

        try:
            rgb = decode_hex_color(theme.color)
        except ValueError as exc:
            raise ConfigInvalidError(f"Theme '{theme_id}' has a malformed color: {exc}") from exc

        image = Image.new("RGB", FAVICON_SIZE, color=rgb)
        try:
            image.save(destination, format="ICO", sizes=[FAVICON_SIZE])
        except OSError as exc:
            raise IOFailureError(f"Can't write favicon {destination}: {exc}", path=destination) from exc
        logger.info("Generated favicon for theme '%s' at %s", theme_id, destination)
        result.generated.append(theme_id)
    return result
