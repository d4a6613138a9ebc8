"""Theme and font registries loaded from their discovery directories."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigInvalidError, IOFailureError, NotFoundError

logger = logging.getLogger(__name__)

FONT_MANIFEST_FILENAME = "family.json"
FONT_EXTENSIONS = {".woff2", ".woff", ".ttf", ".otf"}


class Theme(BaseModel):
    """Accent color and the text color drawn on top of it."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    color: str = Field(description="Main theme color (hex).")
    fgcolor: str = Field(description="Text color on the theme color (hex).")


class FontFamily(BaseModel):
    """A font family discovered under the font directory."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    fallback: str = Field(default="sans-serif")
    files: tuple[str, ...] = Field(default=(), description="Font file names within the family directory.")


def load_themes(themes_root: Path) -> dict[str, Theme]:
    """Load every ``<id>.json`` theme file under ``themes_root``."""
    if not themes_root.is_dir():
        raise NotFoundError(f"Theme directory {themes_root} not found", path=themes_root)

    themes: dict[str, Theme] = {}
    for theme_file in sorted(themes_root.glob("*.json")):
        data = _read_json(theme_file)
        try:
            themes[theme_file.stem] = Theme.model_validate(data)
        except ValidationError as exc:
            raise ConfigInvalidError(f"Theme validation failed for {theme_file}: {exc}", path=theme_file) from exc
        logger.debug("Loaded theme '%s' from %s", theme_file.stem, theme_file)
    return themes


def load_fonts(fonts_root: Path | None) -> dict[str, FontFamily]:
    """Load font families; each subdirectory of ``fonts_root`` is one family."""
    if fonts_root is None:
        return {}
    if not fonts_root.is_dir():
        raise NotFoundError(f"Font directory {fonts_root} not found", path=fonts_root)

    fonts: dict[str, FontFamily] = {}
    for family_dir in sorted(path for path in fonts_root.iterdir() if path.is_dir()):
        manifest_path = family_dir / FONT_MANIFEST_FILENAME
        data: dict[str, Any] = {"name": family_dir.name}
        if manifest_path.exists():
            manifest = _read_json(manifest_path)
            if not isinstance(manifest, dict):
                raise ConfigInvalidError(f"{manifest_path} does not define an object root", path=manifest_path)
            data.update(manifest)
        data["files"] = tuple(
            sorted(item.name for item in family_dir.iterdir() if item.suffix.lower() in FONT_EXTENSIONS)
        )
        if not data["files"]:
            logger.warning("Font family '%s' has no font files.", family_dir.name)
        try:
            fonts[family_dir.name] = FontFamily.model_validate(data)
        except ValidationError as exc:
            raise ConfigInvalidError(f"Font family validation failed for {family_dir}: {exc}", path=family_dir) from exc
    return fonts


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigInvalidError(f"Malformed JSON in {path}: {exc}", path=path) from exc
    except OSError as exc:
        raise IOFailureError(f"Can't read {path}: {exc}", path=path) from exc
